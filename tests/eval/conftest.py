"""Fixtures for the worked-example suite."""

from pathlib import Path
from typing import Any

import pytest
import yaml

EVAL_DIR = Path(__file__).parent


@pytest.fixture(scope="session")
def scenario_file() -> dict[str, Any]:
    """Load worked tax scenarios from YAML."""
    path = EVAL_DIR / "test_scenarios.yaml"
    return yaml.safe_load(path.read_text())


@pytest.fixture(scope="session")
def eval_scenarios(scenario_file: dict[str, Any]) -> list[dict[str, Any]]:
    return scenario_file["scenarios"]


@pytest.fixture(scope="session")
def provisional_scenarios(scenario_file: dict[str, Any]) -> list[dict[str, Any]]:
    return scenario_file["provisional"]
