from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class LookupRecord:
    """Location and network ownership of a single IP address.

    Every field defaults to its empty value and empty fields are left out of
    ``to_dict()``. ``isp``, ``domain``, ``network_type`` and the ``is_*`` risk
    flags are reserved: the GeoLite2 City and ASN databases do not carry that
    data, so lookups never populate them.
    """

    continent: str = ""
    continent_code: str = ""
    country: str = ""
    country_code: str = ""
    region: str = ""
    region_code: str = ""
    city: str = ""
    postal_code: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str = ""

    asn: int = 0
    asn_org: str = ""
    isp: str = ""
    domain: str = ""
    network_type: str = ""

    is_anonymous: bool = False
    is_anonymous_vpn: bool = False
    is_hosting: bool = False
    is_proxy: bool = False
    is_tor_exit_node: bool = False
    accuracy_radius: int = 0

    @property
    def has_location(self) -> bool:
        return bool(self.country_code or self.latitude or self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a dictionary for JSON serialization, omitting empty fields."""
        return {key: value for key, value in asdict(self).items() if value}
