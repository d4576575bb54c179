"""Shared pytest fixtures for all test modules."""
import pytest

from straitbuilder.generators import clear_cache
from straitbuilder.mansions import mansion_slots
from straitbuilder.models import Mode, Side


# === Entity Fixtures ===

@pytest.fixture
def first_slot():
    """A mansion slot well clear of every reserved zone."""
    return mansion_slots()[0]


@pytest.fixture(params=list(Side), ids=lambda s: s.value)
def side(request):
    return request.param


@pytest.fixture(params=list(Mode), ids=lambda m: m.value)
def mode(request):
    return request.param


@pytest.fixture
def fresh_cache():
    """Start and finish with an empty generation cache."""
    clear_cache()
    yield
    clear_cache()
