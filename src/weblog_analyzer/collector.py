# collector.py - record sources for the analyzer
import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from dateutil import parser as dateparser
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from .errors import LogSourceError

logger = logging.getLogger(__name__)

# MongoDB connection
MONGO_HOST = os.getenv('MONGO_HOST', 'mongodb')
MONGO_PORT = int(os.getenv('MONGO_PORT', 27017))
MONGO_DB = os.getenv('MONGO_DB', 'logdb')
MONGO_COLLECTION = os.getenv('MONGO_COLLECTION', 'logs')

# Regex for Common/Combined Log Format
LOG_PATTERN = re.compile(
    r'(?P<ip>\S+) '
    r'(?P<ident>\S+) '
    r'(?P<user>\S+) '
    r'\[(?P<time>[^\]]+)\] '
    r'"(?P<request>[^"]*)" '
    r'(?P<status>\d{3}) '
    r'(?P<size>\S+)'
    r'( "(?P<referer>[^"]*)")?'
    r'( "(?P<agent>[^"]*)")?'
)

# Plain format: year month day hour minute, e.g. "2015 06 01 02 54"
SIMPLE_PATTERN = re.compile(
    r'^(?P<year>\d{4})\s+'
    r'(?P<month>\d{1,2})\s+'
    r'(?P<day>\d{1,2})\s+'
    r'(?P<hour>\d{1,2})\s+'
    r'(?P<minute>\d{1,2})\s*$'
)


@dataclass(frozen=True)
class LogEntry:
    """One access: the time fields of a single log line"""
    year: int
    month: int
    day: int
    hour: int
    minute: int = 0

    @classmethod
    def from_datetime(cls, dt):
        # aware times are bucketed in UTC, the same as what MongoDB hands back
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute)

    def __str__(self):
        return f'{self.year} {self.month:02d} {self.day:02d} {self.hour:02d} {self.minute:02d}'


def parse_log_line(line):
    """Parse one log line into a LogEntry, or None if it is not a log line"""
    if not line or not line.strip():
        return None
    line = line.strip()

    m = SIMPLE_PATTERN.match(line)
    if m:
        return LogEntry(**{k: int(v) for k, v in m.groupdict().items()})

    m = LOG_PATTERN.match(line)
    if not m:
        return None
    # time looks like: 10/Oct/2000:13:55:36 -0700
    try:
        dt = dateparser.parse(m.group('time').replace(':', ' ', 1))
    except (ValueError, OverflowError):
        return None
    if dt is None:
        return None
    return LogEntry.from_datetime(dt)


class LogfileReader:
    """Reads a log file once and hands out its entries in order.

    The whole file is parsed up front so that reset() can rewind
    without touching the file again.
    """

    def __init__(self, filename):
        self.filename = filename
        self._entries = []
        self._position = 0
        self._load()

    def _load(self):
        try:
            with open(self.filename, 'r', errors='ignore') as f:
                for line_num, line in enumerate(f, 1):
                    entry = parse_log_line(line)
                    if entry is None:
                        if line.strip():
                            logger.debug('%s:%d: unrecognized line skipped', self.filename, line_num)
                        continue
                    self._entries.append(entry)
        except OSError as e:
            raise LogSourceError(f'Cannot read log file {self.filename}', details=e) from e
        logger.debug('Loaded %d entries from %s', len(self._entries), self.filename)

    def reset(self):
        self._position = 0

    def has_next(self):
        return self._position < len(self._entries)

    def next(self):
        if not self.has_next():
            raise StopIteration('no more log entries')
        entry = self._entries[self._position]
        self._position += 1
        return entry

    def print_data(self):
        """Print every entry in the file"""
        for entry in self._entries:
            print(entry)


# ===== MongoDB-backed source: reads what the log collector stored =====
_mongo_client = None


def get_mongo_client():
    """Get or create MongoDB client with connection pooling"""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = MongoClient(
            MONGO_HOST,
            MONGO_PORT,
            maxPoolSize=50,
            minPoolSize=10,
            maxIdleTimeMS=45000
        )
    return _mongo_client


def get_db():
    """Get MongoDB collection"""
    client = get_mongo_client()
    db = client[MONGO_DB]
    return db[MONGO_COLLECTION]


class MongoRecordSource:
    """Record source over the `time` field of a log collection.

    Each reset() issues a fresh query, so a pass sees the collection as it
    is when the pass starts.
    """

    def __init__(self, collection=None):
        self.collection = collection if collection is not None else get_db()
        self._cursor = None
        self._pending = None

    def reset(self):
        self._pending = None
        try:
            self._cursor = iter(self.collection.find({}, {'_id': 0, 'time': 1}).sort('time', ASCENDING))
        except PyMongoError as e:
            self._cursor = None
            raise LogSourceError('Cannot query log collection', details=e) from e

    def _fill(self):
        if self._cursor is None:
            self.reset()
        while self._pending is None:
            try:
                doc = next(self._cursor)
            except StopIteration:
                return
            except PyMongoError as e:
                raise LogSourceError('Cannot read log collection', details=e) from e
            t = doc.get('time')
            if isinstance(t, datetime):
                self._pending = LogEntry.from_datetime(t)
            else:
                logger.debug('Document without usable time skipped: %r', doc)

    def has_next(self):
        self._fill()
        return self._pending is not None

    def next(self):
        if not self.has_next():
            raise StopIteration('no more log entries')
        entry, self._pending = self._pending, None
        return entry

    def print_data(self):
        self.reset()
        while self.has_next():
            print(self.next())
