"""Pytest configuration and shared fixtures."""

import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from shiftboard.config import ShiftboardConfig
from shiftboard.domain.models import Base
from shiftboard.domain.repositories import InMemoryShiftRepository
from shiftboard.engine.rule_engine import RuleEngine


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def id_factory():
    """Predictable ids: s1, s2, ..."""
    counter = itertools.count(1)
    return lambda: f"s{next(counter)}"


@pytest.fixture
def repo():
    return InMemoryShiftRepository()


@pytest.fixture
def engine(repo, id_factory):
    return RuleEngine(repo, ShiftboardConfig(), id_factory=id_factory)


@pytest.fixture
def session_factory():
    """In-memory database shared by every session of one test."""
    db = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(db)
    yield sessionmaker(bind=db)
    db.dispose()
