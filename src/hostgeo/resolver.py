"""Concurrent IP lookups against the local GeoLite2 City and ASN databases."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import geoip2.database
import geoip2.errors
import maxminddb

from .config import AppSettings
from .constants import DEFAULT_DB_SUBDIR, MAX_ACCURACY_RADIUS
from .errors import (
    ASNLookupError,
    CityLookupError,
    ClosedError,
    ConfigError,
    DatabaseOpenError,
    GeoIPError,
    InvalidAddressError,
)
from .localization import resolve_name
from .models import LookupRecord
from .provisioner import DatabaseProvisioner
from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_OPEN_ERRORS = (OSError, ValueError, maxminddb.InvalidDatabaseError)
_QUERY_ERRORS = (geoip2.errors.GeoIP2Error, maxminddb.InvalidDatabaseError, TypeError, ValueError)


def default_db_dir() -> Path:
    """Directory used when none is given: ``$HOSTGEO_DB_DIR`` or ``~/.hostgeo/geoip``."""
    configured = AppSettings().DB_DIR
    if configured:
        return Path(configured).expanduser()
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigError(f"Failed to get user home directory: {exc}") from exc
    return home.joinpath(*DEFAULT_DB_SUBDIR)


def _open_reader(path: Path, label: str) -> geoip2.database.Reader:
    try:
        return geoip2.database.Reader(os.fspath(path))
    except _OPEN_ERRORS as exc:
        raise DatabaseOpenError(f"Failed to open {label} database {path}: {exc}") from exc


@dataclass(frozen=True)
class _Readers:
    """Both database readers, open together or not at all."""

    city: geoip2.database.Reader
    asn: geoip2.database.Reader

    def close(self) -> None:
        try:
            self.city.close()
        finally:
            self.asn.close()


class GeoResolver:
    """Resolve IP addresses into location and ASN records.

    Construction provisions the databases in ``db_dir`` (downloading whatever
    is missing) and opens both of them. ``lookup`` may be called from any
    number of threads at once; ``close`` waits for in-flight lookups and after
    it returns every lookup raises ``ClosedError``.
    """

    def __init__(
        self,
        db_dir: Optional[Path | str] = None,
        *,
        language: Optional[str] = None,
        provisioner: Optional[DatabaseProvisioner] = None,
    ):
        self.db_dir = Path(db_dir) if db_dir is not None else default_db_dir()
        self.language = language or AppSettings().LOOKUP_LANGUAGE
        self._lock = ReadWriteLock()

        paths = (provisioner or DatabaseProvisioner()).ensure(self.db_dir)

        city_reader = _open_reader(paths.city, "city")
        try:
            asn_reader = _open_reader(paths.asn, "ASN")
        except DatabaseOpenError:
            city_reader.close()
            raise

        self._readers: Optional[_Readers] = _Readers(city=city_reader, asn=asn_reader)
        logger.info(f"GeoIP databases opened from {self.db_dir}")

    @property
    def closed(self) -> bool:
        return self._readers is None

    def lookup(self, ip: str) -> LookupRecord:
        """
        Look up location and ASN data for ``ip``.

        Args:
            ip: IPv4 or IPv6 address in text form

        Returns:
            A LookupRecord; fields the databases do not know are left empty

        Raises:
            ClosedError: If the resolver has been closed
            InvalidAddressError: If ``ip`` is not an IP address
            CityLookupError: If the city database has no usable entry
            ASNLookupError: If the ASN database has no usable entry
        """
        with self._lock.read_locked():
            readers = self._readers
            if readers is None:
                raise ClosedError("GeoIP resolver is closed")

            address = _parse_address(ip)

            try:
                city = readers.city.city(address)
            except _QUERY_ERRORS as exc:
                logger.debug(f"City lookup failed for {address}: {exc}")
                raise CityLookupError(
                    f"Failed to query city information for {address}: {exc}"
                ) from exc

            try:
                asn = readers.asn.asn(address)
            except _QUERY_ERRORS as exc:
                logger.debug(f"ASN lookup failed for {address}: {exc}")
                raise ASNLookupError(
                    f"Failed to query ASN information for {address}: {exc}"
                ) from exc

            return _compose_record(city, asn, self.language)

    def lookup_many(self, ips: Iterable[str]) -> Dict[str, Union[LookupRecord, GeoIPError]]:
        """Look up several addresses, keeping per-address failures instead of raising.

        ``ClosedError`` is still raised since no address can succeed after close.
        """
        results: Dict[str, Union[LookupRecord, GeoIPError]] = {}
        for ip in ips:
            if ip in results:
                continue
            try:
                results[ip] = self.lookup(ip)
            except ClosedError:
                raise
            except GeoIPError as exc:
                results[ip] = exc
        return results

    async def lookup_async(self, ip: str) -> LookupRecord:
        """Run ``lookup`` in the default executor so the event loop keeps running."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.lookup, ip)

    def close(self) -> None:
        """Close both databases. Safe to call more than once."""
        with self._lock.write_locked():
            readers, self._readers = self._readers, None
            if readers is None:
                return
            readers.close()
        logger.info(f"GeoIP databases in {self.db_dir} closed")

    def __enter__(self) -> "GeoResolver":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def open_resolver(
    db_dir: Optional[Path | str] = None,
    *,
    language: Optional[str] = None,
    provisioner: Optional[DatabaseProvisioner] = None,
) -> GeoResolver:
    """Provision, open and return a ready GeoResolver."""
    return GeoResolver(db_dir, language=language, provisioner=provisioner)


def _parse_address(ip: str) -> IPAddress:
    # ipaddress accepts packed bytes and ints; only text addresses are queries
    if not isinstance(ip, str):
        raise InvalidAddressError(f"Invalid IP address: {ip!r}")
    try:
        return ipaddress.ip_address(ip.strip())
    except ValueError as exc:
        raise InvalidAddressError(f"Invalid IP address: {ip!r}") from exc


def _compose_record(city: Any, asn: Any, language: str) -> LookupRecord:
    location = city.location
    region = region_code = ""
    if city.subdivisions:
        first = city.subdivisions[0]
        region = resolve_name(first.names, language)
        region_code = first.iso_code or ""

    radius = location.accuracy_radius or 0

    return LookupRecord(
        continent=resolve_name(city.continent.names, language),
        continent_code=city.continent.code or "",
        country=resolve_name(city.country.names, language),
        country_code=city.country.iso_code or "",
        region=region,
        region_code=region_code,
        city=resolve_name(city.city.names, language),
        postal_code=city.postal.code or "",
        latitude=location.latitude or 0.0,
        longitude=location.longitude or 0.0,
        timezone=location.time_zone or "",
        accuracy_radius=min(max(radius, 0), MAX_ACCURACY_RADIUS),
        asn=asn.autonomous_system_number or 0,
        asn_org=asn.autonomous_system_organization or "",
    )
