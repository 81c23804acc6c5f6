"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from yoto_extractor.utils.path import ensure_https, sanitize_output_dir

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"
)


class ExtractConfig(BaseModel):
    """A validated configuration model for one extraction run."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Target
    url: str
    output_dir: Path

    # Network Settings
    max_workers: int = 4
    timeout: float = 120.0
    max_redirects: int = 5
    retries: int = 0
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Rejects an empty URL and upgrades a scheme-less one to https."""
        if not v:
            raise ValueError("URL cannot be empty.")
        return ensure_https(v)

    @field_validator("output_dir", mode="before")
    @classmethod
    def validate_output_dir(cls, v: str | Path) -> Path:
        """Ensures the destination folder name is usable on this platform."""
        if not str(v).strip():
            raise ValueError("Destination folder cannot be empty.")
        sanitized = sanitize_output_dir(str(v).strip())
        if not str(sanitized) or str(sanitized) == ".":
            raise ValueError(f"Destination folder '{v}' is not a valid path.")
        return sanitized

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 16:
            raise ValueError("Max workers must be between 1 and 16.")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be a positive number of seconds.")
        return v

    @field_validator("max_redirects")
    @classmethod
    def validate_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Max redirects cannot be negative.")
        return v

    @field_validator("retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0 or v > 5:
            raise ValueError("Retries must be between 0 and 5.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that may appear in the INI file."""
        internal_fields = {"url", "output_dir"}
        return {key for key in cls.model_fields if key not in internal_fields}
