"""Load runtime settings from YAML, a local .env file and the environment."""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml
from dateutil import tz
from dotenv import dotenv_values

from .fetchers.github import DEFAULT_REPO, DEFAULT_USER_AGENT
from .storage import DEFAULT_DATA_FILE

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}

# environment variable -> Settings field
ENV_OVERRIDES = {
    "ADVISORY_REPO": "repo",
    "ADVISORY_DATA_FILE": "data_file",
    "ADVISORY_TIMEZONE": "timezone",
}


@dataclass
class Settings:
    repo: str = DEFAULT_REPO
    data_file: str = DEFAULT_DATA_FILE
    webhook_url: Optional[str] = None
    github_output: Optional[str] = None
    in_ci: bool = False
    timezone: Optional[str] = None  # IANA name, local time when unset
    request_timeout: float = 30
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def environment_name(self) -> str:
        return "GitHub Actions" if self.in_ci else "Local Development"

    def tzinfo(self) -> tzinfo:
        if not self.timezone:
            return tz.tzlocal()
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        return zone


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


def load_yaml_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str] = ".env",
) -> Settings:
    """
    Build Settings, later sources overriding earlier ones:
    defaults, YAML ``monitor`` section, .env file, process environment.

    The .env file is only read outside CI, where secrets come from the runner.
    """
    if environ is None:
        environ = os.environ

    in_ci = is_truthy(environ.get("GITHUB_ACTIONS"))
    env: Dict[str, str] = {}
    if not in_ci and dotenv_path and Path(dotenv_path).exists():
        logger.debug(f"Loading environment from {dotenv_path}")
        env.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    elif not in_ci:
        logger.info("No .env file found, using environment variables only")
    env.update(environ)

    settings = Settings(in_ci=in_ci)

    if config_path:
        monitor = load_yaml_config(config_path).get("monitor") or {}
        for name in ("repo", "data_file", "timezone", "user_agent"):
            if monitor.get(name):
                setattr(settings, name, str(monitor[name]))
        if monitor.get("request_timeout") is not None:
            settings.request_timeout = float(monitor["request_timeout"])

    for var, name in ENV_OVERRIDES.items():
        if env.get(var):
            setattr(settings, name, env[var])

    settings.webhook_url = env.get("GOOGLE_CHAT_WEBHOOK") or None
    settings.github_output = env.get("GITHUB_OUTPUT") or None
    settings.tzinfo()
    return settings
