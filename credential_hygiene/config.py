"""Centralized configuration management using Pydantic Settings."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from credential_hygiene.analysis.domain import DEFAULT_SUBDOMAIN_PREFIXES
from credential_hygiene.analysis.entropy import DEFAULT_WEAK_THRESHOLD
from credential_hygiene.analysis.grouper import DEFAULT_STRONG_THRESHOLD
from credential_hygiene.services.breach_oracle import (
    DEFAULT_BREACH_API_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)


class Settings(BaseSettings):
    """Defines application settings, loaded from environment variables or .env file.

    Attributes
    ----------
    weak_entropy_threshold : int
        Passwords estimated strictly below this many bits are weak.
    strong_entropy_threshold : int, optional
        Duplicates and reuse sharing a password above this many bits are
        not flagged. Unset to flag them regardless of strength.
    subdomain_prefixes : list of str
        Leading host labels ignored when computing a service identity.
    breach_api_url : str
        Range endpoint of the breach corpus.
    breach_timeout : float
        Per-request timeout in seconds.
    db_host : str
        PostgreSQL server hostname.
    db_port : int
        PostgreSQL server port.
    db_name : str
        Database name to connect to.
    db_user : str
        Database username.
    db_password : str
        Database password.
    """

    weak_entropy_threshold: int = DEFAULT_WEAK_THRESHOLD
    strong_entropy_threshold: Optional[int] = DEFAULT_STRONG_THRESHOLD
    subdomain_prefixes: List[str] = list(DEFAULT_SUBDOMAIN_PREFIXES)

    breach_api_url: str = DEFAULT_BREACH_API_URL
    breach_timeout: float = DEFAULT_TIMEOUT
    breach_user_agent: str = DEFAULT_USER_AGENT
    breach_add_padding: bool = True

    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "derp"
    db_user: str = "derp"
    db_password: str = "disforderp"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create a single instance of settings to be used throughout the application
settings = Settings()
