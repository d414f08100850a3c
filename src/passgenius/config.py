"""Runtime settings for PassGenius, read from the environment.

CLI options override the values loaded here.
"""
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_DATA_DIR = os.path.expanduser("~/.passgenius")
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
GENERATORS = ("rules", "ai")


class ConfigError(Exception):
    """Raised when a setting has an invalid value."""
    pass


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    data_dir: str = DEFAULT_DATA_DIR
    generator: str = "rules"
    password_length: int = 16
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_sender: Optional[str] = None
    smtp_starttls: bool = True

    def __post_init__(self):
        if self.generator not in GENERATORS:
            raise ConfigError(
                f"Unknown generator {self.generator!r}; expected one of {', '.join(GENERATORS)}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``
        """
        env = os.environ if env is None else env
        return cls(
            data_dir=os.path.expanduser(env.get("PASSGENIUS_DATA_DIR") or DEFAULT_DATA_DIR),
            generator=(env.get("PASSGENIUS_GENERATOR") or "rules").lower(),
            password_length=_int(env, "PASSGENIUS_PASSWORD_LENGTH", 16),
            gemini_api_key=env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY"),
            gemini_model=env.get("PASSGENIUS_GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            smtp_host=env.get("PASSGENIUS_SMTP_HOST"),
            smtp_port=_int(env, "PASSGENIUS_SMTP_PORT", 587),
            smtp_username=env.get("PASSGENIUS_SMTP_USERNAME"),
            smtp_password=env.get("PASSGENIUS_SMTP_PASSWORD"),
            smtp_sender=env.get("PASSGENIUS_SMTP_SENDER") or env.get("PASSGENIUS_SMTP_USERNAME"),
            smtp_starttls=_bool(env, "PASSGENIUS_SMTP_STARTTLS", True),
        )

    def with_overrides(self, **overrides) -> 'Settings':
        """Return a copy with the given non-None values replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
