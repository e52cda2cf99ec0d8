"""
Exception classes for S3 Auth Python SDK
"""

from typing import Optional, Dict, Any


class S3AuthSDKError(Exception):
    """Base exception for all S3 Auth SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(S3AuthSDKError):
    """Exception raised for validation failures"""
    pass


class UnsupportedPlatformError(S3AuthSDKError):
    """Exception raised when platform features are not supported"""
    pass


class KeyDerivationError(S3AuthSDKError):
    """Exception raised for signing key derivation errors"""
    pass


class ServerCommunicationError(S3AuthSDKError):
    """Exception raised for errors talking to the S3 endpoint"""

    def __init__(self, message: str, error_code: str = "SERVER_ERROR",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
