"""Download-if-absent provisioning of the GeoLite2 databases"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx

from .config import AppSettings
from .constants import (
    ASN_DB_FILENAME,
    CITY_DB_FILENAME,
    DB_DIR_MODE,
    DB_FILE_MODE,
    DOWNLOAD_CHUNK_SIZE,
)
from .errors import ConfigError, DownloadError
from .http_client import get_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], AbstractContextManager[httpx.Client]]


@dataclass(frozen=True)
class ProvisionedDatabases:
    """Paths of the two database files, both present on disk."""

    city: Path
    asn: Path


class DatabaseProvisioner:
    """Make sure the city and ASN databases exist in a directory.

    Files already on disk are trusted as-is and never fetched again. Missing
    files are streamed into a temporary file next to the destination and
    renamed into place only once the whole body has been read, so a
    destination path never holds a partial download.
    """

    def __init__(
        self,
        city_url: Optional[str] = None,
        asn_url: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
        deadline: Optional[float] = None,
    ):
        app_settings = AppSettings()
        self.urls: Dict[str, str] = {
            CITY_DB_FILENAME: city_url or app_settings.CITY_DB_URL,
            ASN_DB_FILENAME: asn_url or app_settings.ASN_DB_URL,
        }
        self.client_factory: ClientFactory = client_factory or get_client
        # Wall-clock budget per file; the client timeout only bounds single reads
        self.deadline = deadline if deadline is not None else app_settings.DOWNLOAD_TIMEOUT

    def ensure(self, directory: Path | str) -> ProvisionedDatabases:
        """
        Create ``directory`` if needed and download any missing database.

        Args:
            directory: Directory that holds both database files

        Returns:
            The paths of the city and ASN databases

        Raises:
            ConfigError: If the directory cannot be created
            DownloadError: If a missing file cannot be fetched
        """
        db_dir = Path(directory)
        try:
            db_dir.mkdir(mode=DB_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                f"Failed to create database directory {db_dir}: {exc}", context="provision"
            ) from exc

        missing = [name for name in self.urls if not (db_dir / name).exists()]
        if not missing:
            logger.debug(f"GeoIP databases already present in {db_dir}")
        else:
            with self.client_factory() as client:
                for name in missing:
                    self._download(client, self.urls[name], db_dir / name)

        return ProvisionedDatabases(city=db_dir / CITY_DB_FILENAME, asn=db_dir / ASN_DB_FILENAME)

    def _download(self, client: httpx.Client, url: str, destination: Path) -> None:
        """Stream ``url`` into ``destination`` through a temporary file."""
        logger.info(f"Downloading {destination.name} from {url}...")

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", suffix=".part", dir=destination.parent
            )
        except OSError as exc:
            raise DownloadError(
                f"Cannot write {destination.name} into {destination.parent}: {exc}", context=url
            ) from exc

        tmp_path = Path(tmp_name)
        started = time.monotonic()
        try:
            with os.fdopen(fd, "wb") as out:
                with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise DownloadError(
                            f"Failed to download {destination.name}: HTTP {response.status_code}",
                            context=url,
                        )
                    for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                        out.write(chunk)
                        if time.monotonic() - started >= self.deadline:
                            raise DownloadError(
                                f"Failed to download {destination.name}: "
                                f"exceeded {self.deadline:g}s deadline",
                                context=url,
                            )
            tmp_path.chmod(DB_FILE_MODE)
            tmp_path.replace(destination)
        except httpx.HTTPError as exc:
            logger.error(f"Failed to download {destination.name}: {exc}")
            raise DownloadError(
                f"Failed to download {destination.name}: {exc}", context=url
            ) from exc
        except DownloadError as exc:
            logger.error(exc.message)
            raise
        except OSError as exc:
            logger.error(f"Failed to write {destination.name}: {exc}")
            raise DownloadError(f"Failed to write {destination.name}: {exc}", context=url) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

        logger.info(f"{destination.name} downloaded successfully ({destination.stat().st_size} bytes)")
