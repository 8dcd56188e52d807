# analyzer.py - hourly, daily and monthly access statistics
# A record source is anything with reset(), has_next() and next(), where
# next() returns an object with integer month, day and hour attributes.
import logging
import os
import threading

from .collector import LogfileReader
from .errors import OutOfRangeFieldError

logger = logging.getLogger(__name__)

LOG_PATH = os.getenv('LOG_PATH', 'demo.log')

MONTHS = 12
DAYS = 28
HOURS = 24
# Monthly averages assume the log spans five years.
YEARS_OF_DATA = 5
# Width of the busiest_two_hour() window, in hour buckets.
WINDOW_WIDTH = 3


def _bucket(value, field, size, offset):
    if isinstance(value, bool) or not isinstance(value, int):
        raise OutOfRangeFieldError(field, value)
    index = value - offset
    if not 0 <= index < size:
        raise OutOfRangeFieldError(field, value)
    return index


def _first_max(counts):
    best = 0
    for i in range(1, len(counts)):
        if counts[i] > counts[best]:
            best = i
    return best


def _first_min(counts):
    best = 0
    for i in range(1, len(counts)):
        if counts[i] < counts[best]:
            best = i
    return best


class LogAnalyzer:
    """Accumulates access counts from a record source and answers queries.

    Counters are never cleared: running a pass twice counts every record
    twice. Build a new analyzer for a fresh count.
    """

    def __init__(self, reader=None):
        self.month_counts = [0] * MONTHS
        self.day_counts = [0] * DAYS
        self.hour_counts = [0] * HOURS
        self.skipped = {'month': 0, 'day': 0, 'hour': 0}
        self.reader = reader if reader is not None else LogfileReader(LOG_PATH)
        self._lock = threading.Lock()

    # ===== Aggregation =====
    def _analyze(self, field, counts, offset):
        with self._lock:
            self.reader.reset()
            seen = 0
            while self.reader.has_next():
                entry = self.reader.next()
                seen += 1
                try:
                    index = _bucket(getattr(entry, field), field, len(counts), offset)
                except OutOfRangeFieldError as e:
                    self.skipped[field] += 1
                    logger.warning('Skipping record %s: %s', entry, e)
                    continue
                counts[index] += 1
            logger.debug('%s pass: %d records read', field, seen)

    def analyze_all_data(self):
        """Run the monthly, daily and hourly passes in that order"""
        self.analyze_monthly_data()
        self.analyze_daily_data()
        self.analyze_hourly_data()

    def analyze_monthly_data(self):
        self._analyze('month', self.month_counts, 1)

    def analyze_daily_data(self):
        self._analyze('day', self.day_counts, 1)

    def analyze_hourly_data(self):
        self._analyze('hour', self.hour_counts, 0)

    # ===== Queries =====
    def _snapshot(self, counts):
        with self._lock:
            return list(counts)

    def hourly_counts(self):
        return self._snapshot(self.hour_counts)

    def daily_counts(self):
        return self._snapshot(self.day_counts)

    def monthly_counts(self):
        return self._snapshot(self.month_counts)

    def number_of_accesses(self):
        """Total accesses, taken from the hourly counts"""
        return sum(self.hourly_counts())

    def busiest_hour(self):
        return _first_max(self.hourly_counts())

    def quietest_hour(self):
        return _first_min(self.hourly_counts())

    def busiest_two_hour(self):
        """Starting hour of the busiest window.

        The window covers three consecutive hours (i, i+1, i+2) and wraps
        past midnight. Ties go to the earliest starting hour.
        """
        counts = self.hourly_counts()
        n = len(counts)
        sums = [sum(counts[(i + k) % n] for k in range(WINDOW_WIDTH)) for i in range(n)]
        return _first_max(sums)

    def busiest_day(self):
        # days start at 1
        return _first_max(self.daily_counts()) + 1

    def quietest_day(self):
        return _first_min(self.daily_counts()) + 1

    def busiest_month(self):
        # months start at 1
        return _first_max(self.monthly_counts()) + 1

    def quietest_month(self):
        return _first_min(self.monthly_counts()) + 1

    def total_accesses_per_month(self):
        """Accesses per month as a new list; changing it leaves the counters alone"""
        return self.monthly_counts()

    def average_accesses_per_month(self):
        return [count // YEARS_OF_DATA for count in self.monthly_counts()]

    def summary(self):
        """All statistics in one JSON-serializable dict"""
        return {
            'total_accesses': self.number_of_accesses(),
            'busiest_hour': self.busiest_hour(),
            'quietest_hour': self.quietest_hour(),
            'busiest_two_hour': self.busiest_two_hour(),
            'busiest_day': self.busiest_day(),
            'quietest_day': self.quietest_day(),
            'busiest_month': self.busiest_month(),
            'quietest_month': self.quietest_month(),
            'total_accesses_per_month': self.total_accesses_per_month(),
            'average_accesses_per_month': self.average_accesses_per_month(),
            'skipped': dict(self.skipped),
        }

    # ===== Console output =====
    def print_monthly_counts(self):
        print('Month: Count')
        for month, count in enumerate(self.monthly_counts(), 1):
            print(f'{month}: {count}')

    def print_daily_counts(self):
        print('Day: Count')
        for day, count in enumerate(self.daily_counts(), 1):
            print(f'{day}: {count}')

    def print_hourly_counts(self):
        print('Hr: Count')
        for hour, count in enumerate(self.hourly_counts()):
            print(f'{hour}: {count}')

    def print_data(self):
        """Print the entries held by the reader"""
        # the reader may rewind itself, so keep passes out while printing
        with self._lock:
            self.reader.print_data()


if __name__ == '__main__':
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO'),
        format='[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    analyzer = LogAnalyzer()
    analyzer.analyze_all_data()
    analyzer.print_hourly_counts()
    analyzer.print_daily_counts()
    analyzer.print_monthly_counts()
    print(f'Total accesses: {analyzer.number_of_accesses()}')
    print(f'Busiest hour: {analyzer.busiest_hour()}')
    print(f'Busiest two-hour period starts at: {analyzer.busiest_two_hour()}')
    print(f'Busiest day: {analyzer.busiest_day()}, quietest day: {analyzer.quietest_day()}')
    print(f'Busiest month: {analyzer.busiest_month()}, quietest month: {analyzer.quietest_month()}')
