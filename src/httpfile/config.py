"""Configurable values exposed to user as environment variables"""
import logging
import os
from typing import Optional

# Level of the ``httpfile`` logger
LOG_LEVEL: str = os.getenv("HTTPFILE_LOG_LEVEL", "WARNING").upper()

logging.getLogger("httpfile").setLevel(LOG_LEVEL)

# Adds request and response headers to debug records. It is recommended to also use ``HTTPFILE_LOG_LEVEL=DEBUG``.
VERBOSE_LOGS: bool = os.getenv("HTTPFILE_VERBOSE_LOGS", "FALSE").upper() == "TRUE"


def parse_timeout(value: str) -> Optional[float]:
    """Seconds as a float, None for "", "none" or "0"."""
    if value.strip().lower() in ("", "none", "0"):
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(
            f"HTTPFILE_TIMEOUT must be a number of seconds or 'none', got {value!r}"
        ) from None


# Seconds handed to the transport for each request; "none" leaves it to the transport
REQUEST_TIMEOUT: Optional[float] = parse_timeout(os.getenv("HTTPFILE_TIMEOUT", "30"))
