import os
from dataclasses import dataclass
from typing import Optional

from . import constants


@dataclass
class AppSettings:
    """Centralized configuration for database provisioning and lookups"""

    # Database location; None means the per-user default directory
    DB_DIR: Optional[str] = os.getenv("HOSTGEO_DB_DIR") or None

    # Remote sources
    CITY_DB_URL: str = os.getenv("HOSTGEO_CITY_DB_URL", constants.CITY_DB_URL)
    ASN_DB_URL: str = os.getenv("HOSTGEO_ASN_DB_URL", constants.ASN_DB_URL)

    # Download budget
    DOWNLOAD_TIMEOUT: float = float(
        os.getenv("HOSTGEO_DOWNLOAD_TIMEOUT", str(constants.DOWNLOAD_TIMEOUT))
    )
    CONNECT_TIMEOUT: float = float(
        os.getenv("HOSTGEO_CONNECT_TIMEOUT", str(constants.CONNECT_TIMEOUT))
    )

    # Lookups
    LOOKUP_LANGUAGE: str = os.getenv("HOSTGEO_LANGUAGE", constants.DEFAULT_LANGUAGE)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
