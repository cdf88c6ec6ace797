"""
Shared fixtures

Units are registered in sys.modules under their own name; the unit_names
fixture removes the ones a test created so tests stay independent.
"""

import sys

import pytest


@pytest.fixture
def unit_names():
    names = []
    yield names
    for name in names:
        sys.modules.pop(name, None)


@pytest.fixture
def namespace():
    """A stand-in for the REPL globals"""
    return {"__name__": "__main__"}
