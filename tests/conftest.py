""" generic fixtures """
import logging
from copy import deepcopy

import pytest

from .testtools import make_client


def pytest_configure():
    "Runs once before all"
    from hyprsession.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "A logger for objects requiring one"
    from hyprsession.logging_setup import get_logger

    return get_logger("tests", level=logging.DEBUG)


CLIENTS = [
    make_client(
        address="0x5a1",
        klass="kitty",
        title="~",
        initialTitle="kitty",
        pid=1201,
        at=[30, 60],
        size=[1200, 800],
        workspace={"id": 1, "name": "1"},
    ),
    make_client(
        address="0x5b2",
        klass="firefox",
        title="Mozilla Firefox",
        initialTitle="Mozilla Firefox",
        pid=1302,
        floating=True,
        at=[100, 100],
        size=[800, 600],
        workspace={"id": 2, "name": "2"},
    ),
    make_client(
        address="0x5c3",
        klass="org.gnome.Nautilus",
        title="Home",
        initialTitle="Files",
        pid=1403,
        workspace={"id": -98, "name": "special:files"},
    ),
]


@pytest.fixture
def clients():
    "A copy of the sample live windows"
    return deepcopy(CLIENTS)
