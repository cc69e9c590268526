"""
Process settings.

Built once at startup by Settings.from_env() and passed explicitly into the
GitHub client and the drawer. Precedence: environment > YAML file > defaults.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from review_picker.config_loader import get_value, load_yaml_config
from review_picker.errors import ConfigError

REVIEWS_FILE_PATH = "reviews.json"
DEFAULT_COMMIT_MESSAGE = "Update {path} via API"

# (settings field, env var, yaml key)
_REQUIRED = [
    ("github_token", "GITHUB_TOKEN", "github.token"),
    ("github_owner", "GITHUB_OWNER", "github.owner"),
    ("github_repo", "GITHUB_REPO", "github.repo"),
]
_OPTIONAL = [
    ("github_branch", "GITHUB_BRANCH", "github.branch"),
    ("github_api_url", "GITHUB_API_URL", "github.api_url"),
    ("host", "HOST", "server.host"),
    ("port", "PORT", "server.port"),
    ("commit_message", "REVIEW_PICKER_COMMIT_MESSAGE", "commit_message"),
    ("request_timeout", "REVIEW_PICKER_HTTP_TIMEOUT", "http.timeout_seconds"),
]


class Settings(BaseModel):
    """Immutable configuration for one process."""
    model_config = ConfigDict(frozen=True)

    github_token: str = Field(repr=False)
    github_owner: str
    github_repo: str
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"
    file_path: str = REVIEWS_FILE_PATH
    host: str = "0.0.0.0"
    port: int = Field(default=4000, ge=1, le=65535)
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("commit_message")
    @classmethod
    def _check_commit_message(cls, value: str) -> str:
        """Only a {path} placeholder is allowed; fail at startup rather than on every draw."""
        try:
            value.format(path=REVIEWS_FILE_PATH)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"commit_message may only use the {{path}} placeholder (got {value!r}): {e!r}"
            ) from e
        return value

    @property
    def commit_message_for_path(self) -> str:
        return self.commit_message.format(path=self.file_path)

    @classmethod
    def from_env(cls, config_path: Optional[Path] = None, load_env_file: bool = True) -> "Settings":
        """
        Read settings from .env, the process environment and the optional YAML file.

        Raises ConfigError naming every missing required variable.
        """
        if load_env_file:
            load_dotenv()
        raw = load_yaml_config(config_path)

        values = {}
        missing = []
        for field, env_var, yaml_key in _REQUIRED:
            value = os.getenv(env_var) or get_value(raw, yaml_key)
            if not value:
                missing.append(env_var)
            else:
                values[field] = str(value)
        if missing:
            raise ConfigError(
                f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required "
                "(set in the environment, .env or the YAML config)",
                missing=missing,
            )

        for field, env_var, yaml_key in _OPTIONAL:
            value = os.getenv(env_var) or get_value(raw, yaml_key)
            if value is not None and value != "":
                values[field] = value

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
