"""Shared fixtures for the workcal test suite."""

from __future__ import annotations

import pytest

from workcal.config import reset_config
from workcal.services.catalog import CalendarCatalog
from workcal.services.conflicts import ConflictDetector
from workcal.services.templates import NIGHT_SHIFT, STANDARD, TWENTY_FOUR_SEVEN


@pytest.fixture(autouse=True)
def _reset_config():
    """Each test starts from default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def catalog() -> CalendarCatalog:
    return CalendarCatalog()


@pytest.fixture()
def detector(catalog) -> ConflictDetector:
    return ConflictDetector(catalog)


@pytest.fixture()
def standard(catalog):
    """Mon-Fri 09:00-18:00 with a 13:00-14:00 break."""
    return catalog.create_from_template(STANDARD, "Office")


@pytest.fixture()
def night_shift(catalog):
    return catalog.create_from_template(NIGHT_SHIFT, "Night Crew")


@pytest.fixture()
def round_the_clock(catalog):
    return catalog.create_from_template(TWENTY_FOUR_SEVEN, "Servers")
