"""
Generative AI Engine Module
===========================

Natural-language trip advice from a chat completions model:
- Fixed travel-assistant system instruction
- User prompt built from origin, destination and travel date
- Advice text returned as markdown for rendering

Classes:
    AIAdviceClient: Chat completions client for trip advice

Functions:
    build_messages(): System and user messages for an advice request
    format_travel_date(): Readable date text used in the prompt
"""

# Version and module info
__version__ = "1.0.0"
__module_name__ = "genai_engine"

from .advice_client import (
    AIAdviceClient,
    build_messages,
    format_travel_date,
    SYSTEM_INSTRUCTION,
)

# Define public API
__all__ = [
    "AIAdviceClient",
    "build_messages",
    "format_travel_date",
    "SYSTEM_INSTRUCTION",
]

def get_ai_model_config():
    """
    Return chat model configuration parameters
    """
    from config import config

    return {
        "model_name": config.OPENAI_MODEL,
        "api_url": config.OPENAI_API_URL,
        "timeout_seconds": config.AI_API_TIMEOUT,
    }
