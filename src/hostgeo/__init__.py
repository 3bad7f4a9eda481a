"""
hostgeo - offline IP geolocation for host scanning

This package resolves IP addresses into location and autonomous-system data
using locally provisioned GeoLite2 City and ASN databases.
"""

__version__ = "1.0.0"


_ERROR_NAMES = (
    "GeoIPError",
    "ConfigError",
    "DownloadError",
    "DatabaseOpenError",
    "InvalidAddressError",
    "LookupFailedError",
    "CityLookupError",
    "ASNLookupError",
    "ClosedError",
)


# Lazy imports to avoid loading geoip2/httpx when only the version is needed
def __getattr__(name):
    """Lazy loading of package components to avoid unnecessary imports."""
    if name in ("GeoResolver", "open_resolver", "default_db_dir"):
        from . import resolver

        return getattr(resolver, name)
    elif name in ("DatabaseProvisioner", "ProvisionedDatabases"):
        from . import provisioner

        return getattr(provisioner, name)
    elif name == "LookupRecord":
        from .models import LookupRecord

        return LookupRecord
    elif name == "resolve_name":
        from .localization import resolve_name

        return resolve_name
    elif name in _ERROR_NAMES:
        from . import errors

        return getattr(errors, name)
    elif name == "AppSettings":
        from .config import AppSettings

        return AppSettings
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


# Define the public API of the package
__all__ = [
    "GeoResolver",
    "open_resolver",
    "default_db_dir",
    "DatabaseProvisioner",
    "ProvisionedDatabases",
    "LookupRecord",
    "resolve_name",
    "AppSettings",
    *_ERROR_NAMES,
    "__version__",
]
