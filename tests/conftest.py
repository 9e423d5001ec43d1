"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest  # type: ignore[import-not-found]

from time_punch.core.config import ClockConfig


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: Tests that need a real hledger")


@pytest.fixture
def clock_config(tmp_path: Path) -> ClockConfig:
    """Configuration pointing at a temporary timeclock file."""
    return ClockConfig(
        time_file_template=str(tmp_path / "hours.timeclock"),
        time_file=tmp_path / "hours.timeclock",
        budgets_file=tmp_path / "budgets.journal",
        aliases_file=tmp_path / "aliases.journal",
        config_path=tmp_path / "config.yml",
    )

