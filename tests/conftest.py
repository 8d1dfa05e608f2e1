"""
Shared fixtures: the packaged property schema and sample unit files.
"""

import textwrap

import pytest

from balancediff.core.schema import PropertySchema
from balancediff.io.loaders.schema_loader import load_property_schema

PAWN_BEFORE = textwrap.dedent(
    """
    local unitName = "armpw"

    return {
        [unitName] = {
            name = "Pawn",
            maxdamage = 370,
            buildtime = 1650,
            buildpic = "ARMPW.DDS",
            category = "BOT MOBILE WEAPON",
            canmove = true,
            weapons = {
                [1] = { def = "EMG", onlytargetcategory = "NOTSUB" },
            },
            weapondefs = {
                emg = {
                    name = "Machine Gun",
                    range = 180,
                    reloadtime = 0.4,
                    damage = { default = 9, vtol = 3 },
                },
            },
            customparams = { model_author = "FireStorm", paralyzemultiplier = 1 },
        },
    }
    """
)

PAWN_AFTER = textwrap.dedent(
    """
    local unitName = "armpw"

    return {
        [unitName] = {
            name = "Pawn",
            maxdamage = 407,
            buildtime = 1600,
            buildpic = "ARMPW2.DDS",
            category = "BOT MOBILE WEAPON ALL",
            canmove = true,
            weapons = {
                [1] = { def = "EMG", onlytargetcategory = "NOTSUB" },
            },
            weapondefs = {
                emg = {
                    name = "Machine Gun",
                    range = 180,
                    reloadtime = 0.4,
                    damage = { default = 8, vtol = 3 },
                },
            },
            customparams = { model_author = "FireStorm, Beherith", paralyzemultiplier = 1 },
        },
    }
    """
)


@pytest.fixture(scope="session")
def schema() -> PropertySchema:
    """The packaged property schema, loaded once."""
    return load_property_schema()


@pytest.fixture
def write_file(tmp_path):
    """Write dedented text under tmp_path and return the path."""

    def _write(name: str, content: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def pawn_before() -> str:
    return PAWN_BEFORE


@pytest.fixture
def pawn_after() -> str:
    return PAWN_AFTER
