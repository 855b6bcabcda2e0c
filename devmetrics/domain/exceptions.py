from typing import Optional


class AnalyzerException(Exception):
    """Base exception for all profile analysis errors."""
    pass

class UserNotFoundException(AnalyzerException):
    """Raised when the handle does not resolve to a GitHub profile."""
    def __init__(self, handle: str, message: str = "User not found"):
        self.handle = handle
        super().__init__(message)

class FetchFailureException(AnalyzerException):
    """Raised when an API call fails for any reason other than an unknown handle."""
    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
