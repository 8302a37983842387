"""Pytest configuration and shared fixtures."""

import itertools

import pytest

from erdiagram.core.generators import Generators

FIXED_NOW = "2026-01-01T00:00:00+00:00"


def make_generators(prefix: str = "id", now: str = FIXED_NOW) -> Generators:
    """Deterministic generators: ids ``prefix-1``, ``prefix-2``, ... and a frozen clock."""
    counter = itertools.count(1)
    return Generators(new_id=lambda: f"{prefix}-{next(counter)}", now=lambda: now)


@pytest.fixture
def generators():
    """Fresh deterministic generators for each test."""
    return make_generators()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests independent of any real project config or env overrides."""
    for name in (
        "ERDIAGRAM_PROJECT_DIR",
        "ERDIAGRAM_HORIZONTAL_SPACING",
        "ERDIAGRAM_VERTICAL_SPACING",
        "ERDIAGRAM_DSL_HEADER",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


ORGS_DSL = """
# organisation schema
TABLE orgs "Organisations" PK=id LABEL=org_name COLOR=#336699
COL orgs.id Number req uniq "Primary key"
COL orgs.org_name Text req

TABLE users "Users" PK=id LABEL=name
COL users.id Number req uniq
COL users.name Text req "Display name"
COL users.email Email uniq
REF users.org_id -> orgs.id req "Owning org"

TABLE projects PK=id
COL projects.id Number req
REF projects.org_id -> orgs.id

TABLE assets PK=id
COL assets.id Number req
REF assets.org_id -> orgs.id

MEMO "Orgs own everything\\nincluding assets"
"""


@pytest.fixture
def orgs_dsl():
    """A four-table DSL document with one parent and three children."""
    return ORGS_DSL


@pytest.fixture
def generator_factory():
    """Factory for additional deterministic generators within one test."""
    return make_generators
