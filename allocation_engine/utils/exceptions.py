"""
Asset Allocation Engine - Custom Exceptions
"""
from typing import Optional, Any, Dict


class AllocationEngineException(Exception):
    """Base exception for the allocation engine."""
    
    def __init__(
        self,
        message: str = "An error occurred",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AllocationEngineException):
    """Static engine tables reached with a value they do not cover."""
    
    def __init__(
        self,
        message: str = "Invalid engine configuration",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(AllocationEngineException):
    """Caller supplied an input or setting the engine cannot work with."""
    
    def __init__(
        self,
        message: str = "Invalid allocation input",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)
