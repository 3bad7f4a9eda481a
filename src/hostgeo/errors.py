"""Error types raised by hostgeo."""

from typing import Optional


class GeoIPError(Exception):
    """Base exception for all resolver operations."""

    exit_code = 1

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(message)


class ConfigError(GeoIPError):
    """The database directory could not be resolved or created."""

    exit_code = 3


class DownloadError(GeoIPError):
    """A database file could not be fetched."""

    exit_code = 5


class DatabaseOpenError(GeoIPError):
    """A local database file is missing, truncated or not a valid database."""

    exit_code = 6


class InvalidAddressError(GeoIPError, ValueError):
    """The query input is not a parsable IPv4 or IPv6 address."""

    exit_code = 4


class LookupFailedError(GeoIPError):
    """An address could not be resolved against one of the databases."""

    exit_code = 7


class CityLookupError(LookupFailedError):
    pass


class ASNLookupError(LookupFailedError):
    pass


class ClosedError(GeoIPError):
    """The resolver was used after close()."""

    exit_code = 8
