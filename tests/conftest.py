import pytest

from weblog_analyzer.collector import LogEntry


class ListSource:
    """In-memory record source that counts how often it was rewound"""

    def __init__(self, entries):
        self.entries = list(entries)
        self.position = 0
        self.resets = 0

    def reset(self):
        self.position = 0
        self.resets += 1

    def has_next(self):
        return self.position < len(self.entries)

    def next(self):
        entry = self.entries[self.position]
        self.position += 1
        return entry

    def print_data(self):
        for entry in self.entries:
            print(entry)


def entry(month, day, hour):
    return LogEntry(2015, month, day, hour, 0)


@pytest.fixture
def sample_source():
    return ListSource([entry(1, 1, 3), entry(1, 1, 3), entry(2, 5, 9)])
