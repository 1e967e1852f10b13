"""
Pytest configuration for csv-safe tests.
"""

import csv
import os
from pathlib import Path
from typing import Generator

import pytest

from csv_safe.config import CsvSafeConfig


_CONFIG_ENV = ["CSVSAFE_KEY_ITERATIONS", "CSVSAFE_DELIMITER", "CSVSAFE_ENCODING"]


@pytest.fixture(autouse=True)
def fast_config() -> Generator[None, None, None]:
    """
    Give every test a fresh configuration with a cheap key derivation.

    The iteration count only affects speed, so tests use a small one.
    The original environment is restored afterward.
    """
    original_env = {key: os.environ.get(key) for key in _CONFIG_ENV}
    for key in _CONFIG_ENV:
        os.environ.pop(key, None)
    os.environ["CSVSAFE_KEY_ITERATIONS"] = "100"

    CsvSafeConfig.initialize()

    yield

    for key, value in original_env.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)
    CsvSafeConfig._config = {}
    CsvSafeConfig._initialized = False


def write_csv(path: Path, rows: list[list[str]]) -> Path:
    """Write rows to a CSV file with the default dialect."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)
    return path


def read_csv(path: Path) -> list[list[str]]:
    """Read every row of a CSV file."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return [row for row in csv.reader(f)]


@pytest.fixture
def people_csv(tmp_path: Path) -> Path:
    """
    A small CSV file with one sensitive column.

    Header ``Name,SSN,Amount`` and three data rows.
    """
    return write_csv(
        tmp_path / "people.csv",
        [
            ["Name", "SSN", "Amount"],
            ["Alice", "123-45-6789", "100.50"],
            ["Bob", "987-65-4321", "20"],
            ["Carol", " 555-12-3456 ", "7"],
        ],
    )


@pytest.fixture
def wide_csv(tmp_path: Path) -> Path:
    """A CSV file with two sensitive columns in the middle of four others."""
    return write_csv(
        tmp_path / "wide.csv",
        [
            ["Id", "A", "City", "B", "Score", "Notes"],
            ["1", "alpha", "Oslo", "beta", "9", "first"],
            ["2", "gamma", "Lima", "delta", "7", "second, with comma"],
            ["3", "", "Rome", "epsilon", "5", ""],
            ["4", "zeta", "Nice", "", "3", "fourth"],
        ],
    )
