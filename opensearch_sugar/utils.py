# opensearch_sugar/utils.py

import logging
import os
import urllib3

from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv
from opensearchpy import OpenSearch


DEFAULT_POLL_INTERVAL = 5
DEFAULT_POLL_TIMEOUT = 300

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_number(name, cast, default):
    """Numeric env var; unset or blank (as left by .env templates) means `default`."""
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Connection and polling settings, usually read from the environment / .env."""

    url: str
    auth: Optional[Tuple[str, str]] = None
    verify_certs: bool = False
    timeout: int = 60
    max_retries: int = 3
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_POLL_TIMEOUT

    @classmethod
    def from_env(cls, dotenv_path=None) -> "Settings":
        """
        Build settings from OPENSEARCH_* / ML_POLL_* variables.
        A .env file (or `dotenv_path`) is loaded first; real env vars win.
        """
        load_dotenv(dotenv_path=dotenv_path)

        url = os.getenv("OPENSEARCH_URL")
        if not url:
            raise ValueError("Missing OPENSEARCH_URL in environment or .env file")

        user, password = os.getenv("OPENSEARCH_USR"), os.getenv("OPENSEARCH_PWD")
        if bool(user) != bool(password):
            raise ValueError("OpenSearch credentials (OPENSEARCH_USR & OPENSEARCH_PWD) must be set together!")

        return cls(
            url=url,
            auth=(user, password) if user else None,
            verify_certs=os.getenv("OPENSEARCH_VERIFY_CERTS", "false").strip().lower() in _TRUTHY,
            timeout=_env_number("OPENSEARCH_TIMEOUT", int, 60),
            max_retries=_env_number("OPENSEARCH_MAX_RETRIES", int, 3),
            poll_interval=_env_number("ML_POLL_INTERVAL", float, DEFAULT_POLL_INTERVAL),
            poll_timeout=_env_number("ML_POLL_TIMEOUT", float, DEFAULT_POLL_TIMEOUT),
        )


def create_client(settings: Settings) -> OpenSearch:
    """Create the opensearch-py client every other module talks through."""
    if not settings.verify_certs:
        # Disable SSL warnings (for self-signed certs)
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    return OpenSearch(
        hosts=[settings.url],
        http_auth=settings.auth,
        use_ssl=urlparse(settings.url).scheme == "https",
        verify_certs=settings.verify_certs,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
        retry_on_timeout=True,
    )


def configure_logging(level=logging.INFO, log_file=None):
    """Console logging by default, or append to `log_file` when given."""
    logging.basicConfig(
        filename=log_file,
        level=level,
        format=LOG_FORMAT,
    )
