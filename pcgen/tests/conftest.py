"""Unit tests configuration file."""

import uuid

import pytest

from pcgen.generator.registry import GeneratedTypeRegistry


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def registry():
    return GeneratedTypeRegistry()


@pytest.fixture
def namespace():
    # Generated modules stay in sys.modules, so every test gets its own namespace
    return f"pcgen_test_{uuid.uuid4().hex}"


class Metadata:
    def __init__(self, notify):
        self.notify = notify

    def is_change_tracking_notify(self):
        return self.notify


class SpyDocumentManager:
    def __init__(self, notify=True):
        self.notify = notify

    def get_class_metadata(self, class_name):
        return Metadata(self.notify)


class SpyUnitOfWork:
    """Records hook calls into a shared event list."""

    def __init__(self, events, loaded=()):
        self.events = events
        self.loaded = list(loaded)
        self.scheduled = []

    def load_collection(self, collection):
        self.events.append("load")
        for value in self.loaded:
            collection.unwrap().append(value)

    def schedule_for_synchronization(self, document):
        self.events.append("schedule")
        self.scheduled.append(document)


class SpyCollection:
    """Wrapped collection recording its mutating calls."""

    def __init__(self, events, values=()):
        self.events = events
        self.values = list(values)

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        # Not recorded: tuple() and list() ask for the length of what they copy
        return len(self.values)

    def __contains__(self, value):
        return value in self.values

    def __getitem__(self, index):
        return self.values[index]

    def clear(self):
        self.events.append("clear")
        self.values.clear()

    def append(self, value):
        self.events.append("append")
        self.values.append(value)

    def add(self, value):
        self.events.append("add")
        self.values.append(value)
        return True


@pytest.fixture
def events():
    return []


@pytest.fixture
def spies(events):
    return SpyCollection(events), SpyDocumentManager(), SpyUnitOfWork(events)
