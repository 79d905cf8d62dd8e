"""Generic fixtures."""

import pytest

from clicore.commands.registry import CommandRegistry
from clicore.dispatch import Dispatcher
from clicore.interpreter import Interpreter
from clicore.repeat import RepeatState
from clicore.state import NotificationState
from clicore.ui_out import BufferOutput


def pytest_configure():
    """Runs once before all."""
    from clicore.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def output():
    return BufferOutput()


@pytest.fixture
def registry(output):
    return CommandRegistry(output)


@pytest.fixture
def repeat():
    return RepeatState()


@pytest.fixture
def notifications():
    return NotificationState()


@pytest.fixture
def dispatcher(repeat, notifications, output):
    return Dispatcher(repeat, notifications, output)


@pytest.fixture
def interpreter(output):
    return Interpreter(output)
