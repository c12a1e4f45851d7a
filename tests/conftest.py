import pytest

from latex_renderer.latex.environment_extractor import EnvironmentExtractor
from latex_renderer.latex.environment_registry import EnvironmentRegistry
from latex_renderer.latex.latex_processor import LaTeXProcessor
from latex_renderer.latex.placeholder_store import PlaceholderStore


@pytest.fixture
def store():
    """A fresh placeholder store, as owned by one pass"""
    return PlaceholderStore()


@pytest.fixture
def extractor(store):
    return EnvironmentExtractor(store)


@pytest.fixture
def registry():
    return EnvironmentRegistry()


@pytest.fixture
def latex_processor():
    return LaTeXProcessor()
