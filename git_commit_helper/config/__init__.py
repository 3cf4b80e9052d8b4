"""Configuration Management Package

The whole configuration is one flat JSON file:

    {
        "default_service": "DeepSeek",
        "services": [
            {"service": "DeepSeek", "api_key": "sk-...", "api_endpoint": null, "model": null}
        ],
        "ai_review": true,
        "timeout_seconds": 20,
        "language": "bilingual"
    }

Location: $GIT_COMMIT_HELPER_CONFIG, else the per-user config directory.
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

from git_commit_helper import LANGUAGE_MODES

logger = logging.getLogger(__name__)

CONFIG_ENV = "GIT_COMMIT_HELPER_CONFIG"
APP_NAME = "git-commit-helper"

# Service key -> display name stored in the config file
SERVICE_NAMES = {
    "deepseek": "DeepSeek",
    "openai": "OpenAI",
    "claude": "Claude",
    "copilot": "Copilot",
    "gemini": "Gemini",
    "grok": "Grok",
    "qwen": "Qwen",
}


class ConfigError(Exception):
    """Raised when the configuration is missing or unusable."""
    pass


def normalize_service(name: str | None) -> str | None:
    """Map 'OpenAI', 'openai' or 'ChatGPT' to the service key, None if unknown."""
    if not name:
        return None
    key = str(name).strip().lower()
    if key == "chatgpt":
        key = "openai"
    return key if key in SERVICE_NAMES else None


def display_name(service: str) -> str:
    return SERVICE_NAMES.get(service, service)


def mask_secret(secret: str) -> str:
    if not secret:
        return "(not set)"
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}{'*' * 8}{secret[-4:]}"


@dataclass
class ServiceConfig:
    """Credentials and overrides for one AI service."""
    service: str
    api_key: str = ""
    api_endpoint: Optional[str] = None
    model: Optional[str] = None

    @property
    def display_name(self) -> str:
        return display_name(self.service)

    def to_dict(self) -> dict:
        return {
            "service": self.display_name,
            "api_key": self.api_key,
            "api_endpoint": self.api_endpoint,
            "model": self.model,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Optional['ServiceConfig']:
        service = normalize_service(data.get("service"))
        if service is None:
            return None
        return cls(
            service=service,
            api_key=data.get("api_key") or "",
            api_endpoint=data.get("api_endpoint") or None,
            model=data.get("model") or None,
        )


@dataclass
class GerritConfig:
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None


@dataclass
class Config:
    """User configuration with sensible defaults."""
    default_service: str = "openai"
    services: list[ServiceConfig] = field(default_factory=list)
    ai_review: bool = True
    timeout_seconds: int = 20
    max_tokens: int = 2048
    language: str = "bilingual"
    log_field: bool = False
    test_suggestions: bool = False
    max_diff_chars: int = 20000
    gerrit: Optional[GerritConfig] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.services)

    def get_service(self, service: str) -> Optional[ServiceConfig]:
        for s in self.services:
            if s.service == service:
                return s
        return None

    def get_default_service(self) -> ServiceConfig:
        service = self.get_service(self.default_service)
        if service is None:
            raise ConfigError(
                f"Default service {display_name(self.default_service)} is not configured.\n"
                f"Run: {APP_NAME} service add"
            )
        return service

    def add_service(self, service: ServiceConfig) -> None:
        """Add a service, replacing an existing entry for the same provider."""
        if not self.services:
            self.default_service = service.service
        for i, existing in enumerate(self.services):
            if existing.service == service.service:
                self.services[i] = service
                return
        self.services.append(service)

    def remove_service(self, index: int) -> ServiceConfig:
        removed = self.services.pop(index)
        if removed.service == self.default_service and self.services:
            self.default_service = self.services[0].service
        return removed

    def set_default(self, index: int) -> None:
        self.default_service = self.services[index].service

    def to_dict(self) -> dict:
        data = {
            "default_service": display_name(self.default_service),
            "services": [s.to_dict() for s in self.services],
            "ai_review": self.ai_review,
            "timeout_seconds": self.timeout_seconds,
            "max_tokens": self.max_tokens,
            "language": self.language,
            "log_field": self.log_field,
            "test_suggestions": self.test_suggestions,
            "max_diff_chars": self.max_diff_chars,
        }
        if self.gerrit is not None:
            data["gerrit"] = {k: v for k, v in asdict(self.gerrit).items() if v is not None}
        return data

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.language not in LANGUAGE_MODES:
            warnings.append(f"Invalid language '{self.language}', using '{defaults.language}'")
            self.language = defaults.language

        for name in ("ai_review", "log_field", "test_suggestions"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                warnings.append(f"Invalid {name} '{value}', using {str(getattr(defaults, name)).lower()}")
                setattr(self, name, getattr(defaults, name))

        for name in ("timeout_seconds", "max_tokens", "max_diff_chars"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                warnings.append(f"Invalid {name} '{value}', using {getattr(defaults, name)}")
                setattr(self, name, getattr(defaults, name))

        if self.services and self.get_service(self.default_service) is None:
            fallback = self.services[0].service
            warnings.append(
                f"Default service '{display_name(self.default_service)}' is not configured, "
                f"using '{display_name(fallback)}'"
            )
            self.default_service = fallback

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        services = []
        for raw in data.get("services") or []:
            service = ServiceConfig.from_dict(raw) if isinstance(raw, dict) else None
            if service is None:
                print(f"Config warning: Unknown service entry {raw!r} ignored", file=sys.stderr)
                continue
            services.append(service)

        gerrit = None
        if isinstance(data.get("gerrit"), dict):
            raw = data["gerrit"]
            gerrit = GerritConfig(
                username=raw.get("username"),
                password=raw.get("password"),
                token=raw.get("token"),
            )

        scalar_keys = {"ai_review", "timeout_seconds", "max_tokens", "language",
                       "log_field", "test_suggestions", "max_diff_chars"}
        config = cls(
            default_service=normalize_service(data.get("default_service")) or cls.default_service,
            services=services,
            gerrit=gerrit,
            **{k: v for k, v in data.items() if k in scalar_keys},
        )
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


def default_config_path() -> Path:
    if sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA') or Path.home() / 'AppData' / 'Roaming')
    elif sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support'
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME') or Path.home() / '.config')
    return base / APP_NAME / 'config.json'


class ConfigManager:
    """Manages loading and saving configuration."""

    def __init__(self, path: Path | None = None):
        self._path = path
        self._config: Optional[Config] = None

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        env_path = os.environ.get(CONFIG_ENV)
        return Path(env_path) if env_path else default_config_path()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        path = self.path
        logger.debug("Loading config from %s", path)
        if not path.exists():
            logger.info("No config file at %s, using defaults", path)
            self._config = Config()
            return self._config

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            self._config = Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            self._config = Config()
        return self._config

    def save(self, config: Config) -> Path:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        self._config = config
        logger.info("Config saved to %s", path)
        return path


__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "GerritConfig",
    "ServiceConfig",
    "SERVICE_NAMES",
    "normalize_service",
    "display_name",
    "mask_secret",
    "default_config_path",
]
