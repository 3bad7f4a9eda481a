"""Centralized constants for all modules."""

# Database files
CITY_DB_FILENAME = "GeoLite2-City.mmdb"
ASN_DB_FILENAME = "GeoLite2-ASN.mmdb"

# Remote sources, fetched with a plain unauthenticated GET
CITY_DB_URL = "https://raw.githubusercontent.com/zcyberseclab/zscan/main/data/GeoLite2-City.mmdb"
ASN_DB_URL = "https://raw.githubusercontent.com/zcyberseclab/zscan/main/data/GeoLite2-ASN.mmdb"

# Filesystem
DEFAULT_DB_SUBDIR = (".hostgeo", "geoip")
DB_DIR_MODE = 0o755
DB_FILE_MODE = 0o644
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Timeouts (seconds)
# DOWNLOAD_TIMEOUT bounds each network read and the whole body transfer
DOWNLOAD_TIMEOUT = 300
CONNECT_TIMEOUT = 10

# Localization
DEFAULT_LANGUAGE = "en"
FALLBACK_LANGUAGE = "en"

# accuracy_radius is reported as an unsigned 16-bit value
MAX_ACCURACY_RADIUS = 0xFFFF
