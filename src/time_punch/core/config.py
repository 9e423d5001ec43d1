"""Configuration for the punch clock.

Settings come from three layers, lowest precedence first: built-in defaults,
an optional YAML settings file, and environment variables.
"""

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml  # type: ignore[import-untyped]
from jsonschema import ValidationError, validate  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"%[a-zA-Z]")

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "time-punch" / "config.yml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "time_file": "~/.hours.timeclock",
    "budgets_file": None,
    "aliases_file": None,
    "hledger": "hledger",
    "ignore_accounts": "ignore|workflix|sleeping",
    "editor": None,
    "log_level": "WARNING",
}

# Environment variable -> settings key
ENV_SETTINGS = {
    "TIME_FILE": "time_file",
    "TIME_BUDGETS_FILE": "budgets_file",
    "TIME_ALIASES_FILE": "aliases_file",
    "TIME_HLEDGER": "hledger",
    "TIME_IGNORE_ACCOUNTS": "ignore_accounts",
    "EDITOR": "editor",
    "TIME_LOG_LEVEL": "log_level",
}

SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "time_file": {"type": "string", "minLength": 1},
        "budgets_file": {"type": ["string", "null"]},
        "aliases_file": {"type": ["string", "null"]},
        "hledger": {"type": "string", "minLength": 1},
        "ignore_accounts": {"type": "string"},
        "editor": {"type": ["string", "null"]},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
        },
    },
    "additionalProperties": False,
}


def _expand(path: str) -> Path:
    return Path(os.path.expandvars(path)).expanduser()


@dataclass(frozen=True)
class ClockConfig:
    """Resolved settings for one invocation.

    Attributes:
        time_file_template: Timeclock path template, may hold strftime placeholders
        time_file: Template resolved against the invocation date
        budgets_file: Optional budget journal fragment
        aliases_file: Optional alias journal fragment
        hledger: hledger executable
        ignore_accounts: Regex of accounts excluded from budget reports
        editor: Editor command for the edit command
        log_level: Logging level name
        config_path: Settings file consulted (whether or not it existed)
    """

    time_file_template: str
    time_file: Path
    budgets_file: Optional[Path] = None
    aliases_file: Optional[Path] = None
    hledger: str = "hledger"
    ignore_accounts: str = "ignore|workflix|sleeping"
    editor: Optional[str] = None
    log_level: str = "WARNING"
    config_path: Optional[Path] = None

    @property
    def include_pattern(self) -> str:
        """Glob matching every timeclock file the template can produce."""
        return str(_expand(PLACEHOLDER_PATTERN.sub("*", self.time_file_template)))

    def to_dict(self) -> dict[str, Any]:
        """Get settings as a plain dictionary for display."""
        return {
            "time_file_template": self.time_file_template,
            "time_file": str(self.time_file),
            "include_pattern": self.include_pattern,
            "budgets_file": str(self.budgets_file) if self.budgets_file else None,
            "aliases_file": str(self.aliases_file) if self.aliases_file else None,
            "hledger": self.hledger,
            "ignore_accounts": self.ignore_accounts,
            "editor": self.editor,
            "log_level": self.log_level,
            "config_path": str(self.config_path) if self.config_path else None,
        }


def load_settings_file(config_path: Path) -> dict[str, Any]:
    """Load and validate a YAML settings file.

    Args:
        config_path: Settings file path

    Returns:
        Settings from the file, or an empty dict if the file does not exist

    Raises:
        ValueError: If the file content is invalid
    """
    if not config_path.exists():
        logger.debug(f"No settings file at {config_path}")
        return {}

    with open(config_path, encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}

    try:
        validate(instance=loaded, schema=SETTINGS_SCHEMA)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e.message}")

    return loaded  # type: ignore[no-any-return]


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
    config_path: Optional[Path] = None,
) -> ClockConfig:
    """Build the invocation configuration.

    The timeclock path template is resolved exactly once, here.

    Args:
        environ: Environment mapping. Defaults to os.environ
        now: Date used to resolve the template. Defaults to now
        config_path: Settings file. Defaults to $TIME_CONFIG_FILE or
            ~/.config/time-punch/config.yml

    Returns:
        Resolved configuration

    Raises:
        ValueError: If the settings file is invalid
    """
    if environ is None:
        environ = os.environ
    if now is None:
        now = datetime.now()
    if config_path is None:
        env_path = environ.get("TIME_CONFIG_FILE")
        config_path = _expand(env_path) if env_path else DEFAULT_CONFIG_PATH

    settings = dict(DEFAULT_SETTINGS)
    settings.update(load_settings_file(config_path))
    for env_name, key in ENV_SETTINGS.items():
        value = environ.get(env_name)
        if value:
            settings[key] = value

    log_level = str(settings["log_level"]).upper()
    if log_level not in SETTINGS_SCHEMA["properties"]["log_level"]["enum"]:  # type: ignore[index]
        raise ValueError(f"Invalid log level: {settings['log_level']}")

    template = settings["time_file"]
    return ClockConfig(
        time_file_template=template,
        time_file=_expand(now.strftime(template)),
        budgets_file=_expand(settings["budgets_file"]) if settings["budgets_file"] else None,
        aliases_file=_expand(settings["aliases_file"]) if settings["aliases_file"] else None,
        hledger=settings["hledger"],
        ignore_accounts=settings["ignore_accounts"],
        editor=settings["editor"],
        log_level=log_level,
        config_path=config_path,
    )
