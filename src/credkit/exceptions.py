"""
Exception classes for credkit
"""

from typing import Optional, Dict, Any


class CredkitError(Exception):
    """Base exception for all credkit errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(CredkitError):
    """Exception raised when required input fields are missing or blank"""
    pass


class EncodingError(CredkitError):
    """Exception raised when the hash or base64 primitive itself fails"""
    pass


class ConfigurationError(CredkitError):
    """Exception raised for unreadable or malformed configuration"""
    pass


class ServerCommunicationError(CredkitError):
    """Exception raised for server communication errors"""
    
    def __init__(self, message: str, error_code: str = "SERVER_ERROR", 
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
