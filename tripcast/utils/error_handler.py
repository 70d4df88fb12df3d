"""
Error Handler Utility
====================

Provides centralized error handling and logging for the trip planner application.
Defines the planner's exception types and turns failures into structured,
human-readable error reports.

Key Features:
- Domain exceptions for empty input, unknown places, unavailable device
  location and failing providers
- Error categorization from exception type and HTTP status
- Structured error logging with context information
- Recovery suggestions per error category
- Error statistics and monitoring

Classes:
    ErrorHandler: Main error handling interface
    ErrorCategory: Enumeration of error categories
    ErrorContext: Context information for errors
    ErrorReport: Structured error report
    TripPlannerError: Base class for planner exceptions

Author: Route Weather Trip Planner Team
"""

import logging
import traceback
from typing import Any, Optional, Dict, List
from dataclasses import dataclass
from enum import Enum
from datetime import datetime

import requests


class ErrorCategory(Enum):
    """
    Error categories for classification
    """
    # Input errors
    EMPTY_INPUT = "empty_input"
    PLACE_NOT_FOUND = "place_not_found"
    DATA_VALIDATION = "data_validation"

    # Device errors
    LOCATION_UNAVAILABLE = "location_unavailable"

    # API-related errors
    API_CONNECTION = "api_connection"
    API_TIMEOUT = "api_timeout"
    API_RATE_LIMIT = "api_rate_limit"
    API_AUTHENTICATION = "api_authentication"
    API_QUOTA_EXCEEDED = "api_quota_exceeded"

    # Processing errors
    PIPELINE_BUSY = "pipeline_busy"
    AI_GENERATION_FAILED = "ai_generation_failed"

    # Unknown errors
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """
    Error severity levels
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LocationFailureReason(Enum):
    """Why the device position could not be read"""
    SERVICE_DISABLED = "service_disabled"
    PERMISSION_DENIED = "permission_denied"
    PERMISSION_DENIED_FOREVER = "permission_denied_forever"


LOCATION_FAILURE_MESSAGES = {
    LocationFailureReason.SERVICE_DISABLED: "Location services are disabled.",
    LocationFailureReason.PERMISSION_DENIED: "Location permissions are denied.",
    LocationFailureReason.PERMISSION_DENIED_FOREVER: (
        "Location permissions are permanently denied. Please enable them in settings."
    ),
}


def categorize_status_code(status_code: Optional[int]) -> ErrorCategory:
    """Map an HTTP status code to an API error category"""
    if status_code == 401:
        return ErrorCategory.API_AUTHENTICATION
    elif status_code == 403:
        return ErrorCategory.API_QUOTA_EXCEEDED
    elif status_code == 429:
        return ErrorCategory.API_RATE_LIMIT
    return ErrorCategory.API_CONNECTION


# =============================================================================
# PLANNER EXCEPTIONS
# =============================================================================

class TripPlannerError(Exception):
    """Base class for every failure the trip planner reports to the user"""

    category = ErrorCategory.UNKNOWN

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(TripPlannerError):
    """A required text field was blank"""

    category = ErrorCategory.EMPTY_INPUT

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name.capitalize()} is empty.")


class PlaceNotFoundError(TripPlannerError):
    """Forward geocoding returned no candidates for the text"""

    category = ErrorCategory.PLACE_NOT_FOUND

    def __init__(self, place_text: str, role: str = "place"):
        self.place_text = place_text
        self.role = role
        super().__init__(f"Could not find {role} location: {place_text}")


class LocationUnavailableError(TripPlannerError):
    """Device location service disabled or permission refused"""

    category = ErrorCategory.LOCATION_UNAVAILABLE

    def __init__(self, reason: LocationFailureReason):
        self.reason = reason
        super().__init__(LOCATION_FAILURE_MESSAGES[reason])


class ProviderError(TripPlannerError):
    """
    Non-success response, timeout or transport failure from an external provider

    Attributes:
        provider (str): Provider name ("weather", "ai", ...)
        status_code (int): HTTP status code if a response was received
        body (str): Raw response body if a response was received
        timed_out (bool): Whether the request hit its timeout
    """

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None,
                 body: Optional[str] = None, timed_out: bool = False):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        self.timed_out = timed_out
        super().__init__(message)

    @property
    def category(self) -> ErrorCategory:
        if self.timed_out:
            return ErrorCategory.API_TIMEOUT
        category = categorize_status_code(self.status_code)
        # The AI service answered but produced no usable advice
        if (self.provider == "ai" and self.status_code is not None
                and category == ErrorCategory.API_CONNECTION):
            return ErrorCategory.AI_GENERATION_FAILED
        return category


@dataclass
class ErrorContext:
    """
    Context information for errors

    Attributes:
        module (str): Module where error occurred
        function (str): Function where error occurred
        user_input (Dict): User input that caused the error
        system_state (Dict): Relevant system state
        timestamp (datetime): When error occurred
    """
    module: str
    function: str
    user_input: Optional[Dict] = None
    system_state: Optional[Dict] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


@dataclass
class ErrorReport:
    """
    Structured error report

    Attributes:
        category (ErrorCategory): Error category
        severity (ErrorSeverity): Error severity
        message (str): Human-readable error message
        technical_details (str): Technical error details
        context (ErrorContext): Error context information
        stack_trace (str): Stack trace if available
        recovery_suggestions (List[str]): Suggested recovery actions
        occurred_at (datetime): When error occurred
    """
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    technical_details: str
    context: ErrorContext
    stack_trace: Optional[str] = None
    recovery_suggestions: Optional[List[str]] = None
    occurred_at: Optional[datetime] = None

    def __post_init__(self):
        if self.occurred_at is None:
            self.occurred_at = datetime.now()
        if self.recovery_suggestions is None:
            self.recovery_suggestions = []


class ErrorHandler:
    """
    Main error handling interface
    Provides centralized error management with logging and reporting
    """

    def __init__(self):
        """Initialize Error Handler"""
        self.logger = logging.getLogger(__name__)

        # Error statistics
        self._error_counts = {}
        self._total_errors = 0

        self.logger.debug("Error Handler initialized")

    def handle_error(self, message: str, exception: Exception = None,
                    category: ErrorCategory = None,
                    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                    context: ErrorContext = None) -> ErrorReport:
        """
        Handle an error with logging and reporting

        Args:
            message (str): Human-readable error message
            exception (Exception): Original exception if available
            category (ErrorCategory): Error category, derived from the exception if omitted
            severity (ErrorSeverity): Error severity
            context (ErrorContext): Error context

        Returns:
            ErrorReport: Structured error report
        """
        if category is None:
            category = self.categorize_exception(exception) if exception else ErrorCategory.UNKNOWN

        # Update statistics
        self._total_errors += 1
        self._error_counts[category] = self._error_counts.get(category, 0) + 1

        # Get technical details and stack trace
        technical_details = str(exception) if exception else "No exception details"
        stack_trace = traceback.format_exc() if exception else None

        error_report = ErrorReport(
            category=category,
            severity=severity,
            message=message,
            technical_details=technical_details,
            context=context or ErrorContext(module="unknown", function="unknown"),
            stack_trace=stack_trace,
            recovery_suggestions=self._get_recovery_suggestions(category)
        )

        self._log_error(error_report)

        return error_report

    def handle_api_error(self, api_name: str, endpoint: str, status_code: int = None,
                        response_text: str = None, exception: Exception = None) -> ErrorReport:
        """
        Handle API-specific errors

        Args:
            api_name (str): Name of the API
            endpoint (str): API endpoint
            status_code (int): HTTP status code
            response_text (str): Response text
            exception (Exception): Original exception

        Returns:
            ErrorReport: Structured error report
        """
        if isinstance(exception, requests.exceptions.Timeout):
            category = ErrorCategory.API_TIMEOUT
        else:
            category = categorize_status_code(status_code)

        context = ErrorContext(
            module="api_client",
            function=f"{api_name}_request",
            system_state={
                "api_name": api_name,
                "endpoint": endpoint,
                "status_code": status_code,
                "response_text": response_text[:500] if response_text else None
            }
        )

        message = f"{api_name} API error"
        if status_code:
            message += f" (HTTP {status_code})"

        return self.handle_error(
            message=message,
            exception=exception,
            category=category,
            severity=ErrorSeverity.HIGH if status_code and status_code >= 500 else ErrorSeverity.MEDIUM,
            context=context
        )

    def handle_data_error(self, data_type: str, issue: str,
                         data_sample: Any = None) -> ErrorReport:
        """
        Handle malformed provider payloads

        Args:
            data_type (str): Type of data (e.g., "weather", "geocoding")
            issue (str): Description of the issue
            data_sample (Any): Sample of problematic data

        Returns:
            ErrorReport: Structured error report
        """
        context = ErrorContext(
            module="data_processing",
            function="data_validation",
            system_state={
                "data_type": data_type,
                "data_sample": str(data_sample)[:200] if data_sample else None
            }
        )

        return self.handle_error(
            message=f"Data validation error for {data_type}: {issue}",
            category=ErrorCategory.DATA_VALIDATION,
            severity=ErrorSeverity.MEDIUM,
            context=context
        )

    def handle_planner_error(self, exception: Exception, function: str,
                             user_input: Dict = None) -> ErrorReport:
        """
        Handle a failure that ends a planning run

        Planner exceptions keep their own message. Anything else gets a
        generic message naming the exception type; its text stays in the
        technical details of the report.
        """
        if isinstance(exception, TripPlannerError):
            message = exception.message
            severity = ErrorSeverity.MEDIUM
        else:
            message = f"Trip planning failed: unexpected {exception.__class__.__name__}"
            severity = ErrorSeverity.HIGH

        context = ErrorContext(module="trip_pipeline", function=function, user_input=user_input)
        return self.handle_error(
            message=message,
            exception=exception,
            category=self.categorize_exception(exception),
            severity=severity,
            context=context
        )

    def categorize_exception(self, exception: Exception) -> ErrorCategory:
        """Categorize exception into error category"""
        if isinstance(exception, TripPlannerError):
            return exception.category
        elif isinstance(exception, requests.exceptions.Timeout):
            return ErrorCategory.API_TIMEOUT
        elif isinstance(exception, (requests.exceptions.ConnectionError, ConnectionError)):
            return ErrorCategory.API_CONNECTION
        elif isinstance(exception, TimeoutError):
            return ErrorCategory.API_TIMEOUT
        elif isinstance(exception, ValueError):
            return ErrorCategory.DATA_VALIDATION
        else:
            return ErrorCategory.UNKNOWN

    def _log_error(self, error_report: ErrorReport) -> None:
        """Log error report"""
        log_message = (
            f"[{error_report.category.value}] {error_report.message}\n"
            f"Severity: {error_report.severity.value}\n"
            f"Technical: {error_report.technical_details}\n"
            f"Module: {error_report.context.module}.{error_report.context.function}"
        )

        if error_report.context.system_state:
            log_message += f"\nState: {error_report.context.system_state}"

        if error_report.recovery_suggestions:
            log_message += f"\nSuggestions: {', '.join(error_report.recovery_suggestions)}"

        # Log based on severity
        if error_report.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
        elif error_report.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
        elif error_report.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        if (error_report.severity in [ErrorSeverity.HIGH, ErrorSeverity.CRITICAL]
            and error_report.stack_trace):
            self.logger.debug(f"Stack trace:\n{error_report.stack_trace}")

    def _get_recovery_suggestions(self, category: ErrorCategory) -> List[str]:
        """Get recovery suggestions for error category"""
        suggestions = {
            ErrorCategory.EMPTY_INPUT: [
                "Enter both an origin and a destination"
            ],
            ErrorCategory.PLACE_NOT_FOUND: [
                "Check the spelling of the place name",
                "Add a region or country to the place name"
            ],
            ErrorCategory.LOCATION_UNAVAILABLE: [
                "Enable location services",
                "Grant location permission in settings",
                "Type the origin instead of using current location"
            ],
            ErrorCategory.API_CONNECTION: [
                "Check internet connection",
                "Verify API endpoint is accessible",
                "Try again in a few minutes"
            ],
            ErrorCategory.API_TIMEOUT: [
                "Check network latency",
                "Try again in a few minutes"
            ],
            ErrorCategory.API_RATE_LIMIT: [
                "Wait before making more requests",
                "Consider upgrading API plan"
            ],
            ErrorCategory.API_AUTHENTICATION: [
                "Check API key validity",
                "Verify API key permissions"
            ],
            ErrorCategory.API_QUOTA_EXCEEDED: [
                "Check API usage limits",
                "Wait for quota reset"
            ],
            ErrorCategory.PIPELINE_BUSY: [
                "Wait for the current plan to finish"
            ],
            ErrorCategory.AI_GENERATION_FAILED: [
                "Try planning the trip again",
                "Check the AI model name and endpoint settings"
            ]
        }

        return suggestions.get(category, ["Review error details", "Contact support if issue persists"])

    def get_error_statistics(self) -> Dict:
        """Get error statistics"""
        return {
            "total_errors": self._total_errors,
            "errors_by_category": dict(self._error_counts),
            "most_common_error": max(self._error_counts, key=self._error_counts.get) if self._error_counts else None
        }

    def reset_statistics(self) -> None:
        """Reset error statistics"""
        self._error_counts.clear()
        self._total_errors = 0
        self.logger.info("Error statistics reset")
