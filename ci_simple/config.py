"""Configuration management for report output and notification channels.

Loads from YAML config file with environment variable overrides.
Pattern: CONFIG__{SECTION}__{KEY} overrides nested YAML keys.
Example: CONFIG__NOTIFICATION__TIMEOUT_S=5

The dedicated variables (SMTP_HOST, SLACK_WEBHOOK_URL, ...) win over both.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


# --- Notification ---


class NotificationConfig(BaseModel):
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    notification_email: str = ""  # falls back to smtp_user
    slack_webhook: str = ""
    teams_webhook: str = ""
    discord_webhook: str = ""
    timeout_s: float = Field(default=10.0, gt=0, description="Per-channel timeout")


# --- Reports ---


class ReportConfig(BaseModel):
    reports_dir: str = "reports"
    coverage_path: str = "coverage/coverage-summary.json"
    coverage_source: str = "ci_simple"  # package measured by the runner
    project_name: str = "CI Simple Python Project"


class ServiceConfig(BaseModel):
    report: ReportConfig = ReportConfig()
    notification: NotificationConfig = NotificationConfig()


# env var -> notification field
ENV_VARS = {
    "SMTP_HOST": "smtp_host",
    "SMTP_PORT": "smtp_port",
    "SMTP_USER": "smtp_user",
    "SMTP_PASS": "smtp_pass",
    "NOTIFICATION_EMAIL": "notification_email",
    "SLACK_WEBHOOK_URL": "slack_webhook",
    "TEAMS_WEBHOOK_URL": "teams_webhook",
    "DISCORD_WEBHOOK_URL": "discord_webhook",
}


def _apply_env_overrides(config_dict: dict, prefix: str = "CONFIG") -> dict:
    """Apply environment variable overrides to config dict.

    Pattern: CONFIG__SECTION__KEY=value maps to config[section][key] = value
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        # Type coercion for common cases
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def load_config(
    config_path: Optional[str] = None,
) -> ServiceConfig:
    """Load configuration from YAML file with env overrides.

    Priority: dedicated env vars > CONFIG__ env vars > YAML file > defaults
    """
    config_dict = {}

    if config_path is None:
        config_path = os.getenv("CONFIG_PATH", "config/ci-simple.yml")
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict = _apply_env_overrides(config_dict)

    notification = config_dict.setdefault("notification", {})
    for env_name, field in ENV_VARS.items():
        value = os.getenv(env_name)
        if value:
            notification[field] = value

    return ServiceConfig(**config_dict)


_config: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> ServiceConfig:
    global _config
    _config = load_config(config_path)
    return _config
