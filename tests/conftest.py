# tests/conftest.py
import pytest

from autoscroll.ReferenceDocument import ReferenceDocument
from tests.sonnet_fixture import SONNET_LINES


@pytest.fixture
def sonnet_lines():
    """Fresh copy of the sonnet lines."""
    return list(SONNET_LINES)


@pytest.fixture
def sonnet_document():
    return ReferenceDocument(SONNET_LINES)
