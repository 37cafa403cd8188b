import os

import pytest

from .factories import Calculator, Counter

# Ensure dev mode is enabled (catches many other bugs)
os.environ["PYTHONDEVMODE"] = "1"


@pytest.fixture
def counter() -> Counter:
    return Counter()


@pytest.fixture
def calculator() -> Calculator:
    return Calculator()
