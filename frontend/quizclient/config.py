"""
config.py — client configuration.

Reads .env (python-dotenv) once at import time, the same way the API client
always has. The API base address is resolved per browser session because it
depends on the host the app is being served from.
"""
from __future__ import annotations

import ipaddress
import logging
import os

from dotenv import load_dotenv

load_dotenv()

PRODUCTION_API_URL = "https://eduquiz-platform-backend.onrender.com/api"
DEV_API_URL = "http://localhost:5000/api"


class Config:
    # API
    API_URL = os.getenv("QUIZ_API_URL", "")
    PRODUCTION_API_URL = os.getenv("QUIZ_PRODUCTION_API_URL", PRODUCTION_API_URL)
    DEV_API_URL = os.getenv("QUIZ_DEV_API_URL", DEV_API_URL)

    # Timeouts (seconds)
    AUTH_TIMEOUT = float(os.getenv("QUIZ_AUTH_TIMEOUT", "10"))
    REQUEST_TIMEOUT = float(os.getenv("QUIZ_REQUEST_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL = os.getenv("QUIZ_LOG_LEVEL", "INFO")


def _strip_port(host: str) -> str:
    host = host.strip().lower()
    if host.startswith("["):  # [::1]:8501
        return host[1:].split("]", 1)[0]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def is_loopback_host(host: str | None) -> bool:
    """True for localhost, 127.0.0.0/8 and ::1 (port allowed). Empty counts as local."""
    if not host:
        return True
    name = _strip_port(host)
    if name in ("", "localhost"):
        return True
    try:
        return ipaddress.ip_address(name).is_loopback
    except ValueError:
        return False


def resolve_api_base_url(override: str | None = None, host: str | None = None) -> str:
    """
    Pick the backend address.

    Order: explicit *override* (or QUIZ_API_URL), then the production address
    when *host* is not a loopback host, then the local development address.
    """
    explicit = override or Config.API_URL
    if explicit:
        return explicit.rstrip("/")
    if not is_loopback_host(host):
        return Config.PRODUCTION_API_URL.rstrip("/")
    return Config.DEV_API_URL.rstrip("/")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
