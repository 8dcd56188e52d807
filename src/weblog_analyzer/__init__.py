from .analyzer import LogAnalyzer
from .collector import LogEntry, LogfileReader, MongoRecordSource, parse_log_line
from .errors import LogAnalyzerError, LogSourceError, OutOfRangeFieldError

__all__ = [
    'LogAnalyzer',
    'LogEntry',
    'LogfileReader',
    'MongoRecordSource',
    'parse_log_line',
    'LogAnalyzerError',
    'LogSourceError',
    'OutOfRangeFieldError',
]
