"""
Exception classes for SecureAuth REST Python SDK
"""

from typing import Optional, Dict, Any


class SARestErrorCodes:
    """Standard error codes carried by SDK exceptions"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    CONFIG_SOURCE_ERROR = "CONFIG_SOURCE_ERROR"

    # Variant errors
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
    MISSING_FIELD = "MISSING_FIELD"
    UNEXPECTED_FIELD = "UNEXPECTED_FIELD"

    # Clock errors
    CLOCK_FAILED = "CLOCK_FAILED"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"

    # Signing errors
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_PATH = "INVALID_PATH"
    SIGNING_FAILED = "SIGNING_FAILED"
    CRYPTOGRAPHY_UNAVAILABLE = "CRYPTOGRAPHY_UNAVAILABLE"

    # Transport errors
    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIMEOUT = "TIMEOUT"
    HTTP_ERROR = "HTTP_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"


class SARestSDKError(Exception):
    """Base exception for all SecureAuth REST SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class ConfigurationError(SARestSDKError):
    """Exception raised for missing or invalid credentials and settings"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.INVALID_CONFIG,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class UnsupportedVariantError(SARestSDKError):
    """Exception raised when an operation's fields don't match its variant"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.MISSING_FIELD,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ClockSourceError(SARestSDKError):
    """Exception raised when the timestamp source cannot produce a usable instant"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.CLOCK_FAILED,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SigningError(SARestSDKError):
    """Exception raised when a canonical request can't be built or signed"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.SIGNING_FAILED,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ApplianceCommunicationError(SARestSDKError):
    """Exception raised when the appliance can't be reached"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.CONNECTION_ERROR,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ApplianceResponseError(SARestSDKError):
    """Exception raised for HTTP error statuses and unreadable appliance responses"""

    def __init__(self, message: str, error_code: str = SARestErrorCodes.HTTP_ERROR,
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
