from typing import Optional, Any

class AdboardError(Exception):
    """
    Base exception for the Adboard application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class AuthenticationError(AdboardError):
    """
    Raised when the webhook secret token does not match.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ExternalServiceError(AdboardError):
    """
    Raised when the Telegram Bot API call fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class ConfigurationError(AdboardError):
    """
    Raised at startup when required configuration is missing.
    """
    def __init__(self, message: str = "Invalid configuration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)

class LocationRequiredError(AdboardError):
    """
    Raised when an operation needs the user's location and none is set.
    """
    def __init__(self, message: str = "Location is not set", details: Optional[Any] = None):
        super().__init__(message, code="LOCATION_REQUIRED", status_code=409, details=details)
