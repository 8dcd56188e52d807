# errors.py - exception types raised by the log analyzer


class LogAnalyzerError(Exception):
    """Base class for all analyzer errors"""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details is not None:
            return f"{self.message}: {self.details}"
        return self.message


class OutOfRangeFieldError(LogAnalyzerError):
    """A record field lies outside its bucket range"""

    def __init__(self, field, value):
        super().__init__(f"{field} out of range", details=value)
        self.field = field
        self.value = value


class LogSourceError(LogAnalyzerError):
    """The record source could not be opened or read"""
