"""
AI Trip Advice Client
====================

Asks an OpenAI-compatible chat completions endpoint for travel advice
about a trip between two places on a given date.

Author: Route Weather Trip Planner Team
"""

import logging
from datetime import date
from typing import Dict, List

import requests

# Import configuration
from config import config
from ..utils import ErrorHandler, ProviderError, measure_time


SYSTEM_INSTRUCTION = "You are a travel assistant that provides smart suggestions."

USER_PROMPT_TEMPLATE = (
    "I am planning a trip from {origin} to {destination} on {date_text}. "
    "Suggest useful things to carry, highlight potential weather issues, "
    "and warn me if any route hazards exist."
)

DATE_TEXT_FORMAT = "%A, %d %B %Y"


def format_travel_date(travel_date: date) -> str:
    """Readable travel date for the prompt, e.g. "Friday, 16 October 2026" """
    return travel_date.strftime(DATE_TEXT_FORMAT)


def build_messages(origin: str, destination: str, travel_date: date) -> List[Dict[str, str]]:
    """System instruction plus a single user prompt"""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                origin=origin,
                destination=destination,
                date_text=format_travel_date(travel_date)
            )
        }
    ]


class AIAdviceClient:
    """Chat completions client for trip advice"""

    def __init__(self, api_key: str = None, api_url: str = None, model: str = None,
                 timeout: int = None):
        """Initialize AI Advice Client"""
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler()

        self.api_key = api_key or config.OPENAI_API_KEY
        self.api_url = api_url or config.OPENAI_API_URL
        self.model = model or config.OPENAI_MODEL
        self.timeout = timeout or config.AI_API_TIMEOUT

        self.logger.info(f"AI Advice Client initialized with model {self.model}")

    @measure_time(category="ai")
    def get_advice(self, origin: str, destination: str, travel_date: date) -> str:
        """
        Request travel advice for one trip

        Args:
            origin (str): Origin label
            destination (str): Destination label
            travel_date (date): Travel date

        Returns:
            str: Advice text (markdown) from the first choice

        Raises:
            ProviderError: Non-200 response (message carries the raw body),
                timeout, transport failure or malformed body
        """
        payload = {
            "model": self.model,
            "messages": build_messages(origin, destination, travel_date)
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }

        self.logger.info(f"Requesting trip advice: {origin} -> {destination} on {travel_date}")

        try:
            response = requests.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            self.error_handler.handle_api_error("OpenAI", self.api_url, exception=e)
            raise ProviderError("ai", "AI API request timed out", timed_out=True) from e
        except requests.exceptions.RequestException as e:
            self.error_handler.handle_api_error("OpenAI", self.api_url, exception=e)
            raise ProviderError("ai", f"AI API request failed: {e}") from e

        if response.status_code != 200:
            self.error_handler.handle_api_error("OpenAI", self.api_url,
                                                status_code=response.status_code,
                                                response_text=response.text)
            raise ProviderError("ai", f"AI API error: {response.text}",
                                status_code=response.status_code, body=response.text)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.error_handler.handle_data_error("ai", "unexpected completion format", response.text)
            raise ProviderError("ai", "AI API returned an unexpected response",
                                status_code=response.status_code, body=response.text) from e

        if not isinstance(content, str):
            raise ProviderError("ai", "AI API returned no advice text",
                                status_code=response.status_code, body=response.text)

        self.logger.info(f"Received {len(content)} characters of trip advice")
        return content
