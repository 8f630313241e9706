import logging
import re
from urllib.parse import urlsplit

from webos_remote.domain.device import DEFAULT_CONTROL_PORT, DEFAULT_DEVICE_NAME, Device

logger = logging.getLogger(__name__)

SSDP_ADDRESS = "239.255.255.250"
SSDP_PORT = 1900
WEBOS_SEARCH_TARGET = "urn:lge-com:service:webos-second-screen:1"
VENDOR_DEVICE_NAME = "LG TV"

_VENDOR_MARKER = re.compile(r"\blge?\b|webos", re.IGNORECASE)


def build_search_request(
    search_target: str = WEBOS_SEARCH_TARGET,
    mx: int = 3,
    address: str = SSDP_ADDRESS,
    port: int = SSDP_PORT,
) -> bytes:
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {address}:{port}",
        'MAN: "ssdp:discover"',
        f"MX: {mx}",
        f"ST: {search_target}",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("utf-8")


def parse_headers(response: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in response.splitlines():
        key, separator, value = line.partition(":")
        if not separator or not key.strip():
            continue
        headers.setdefault(key.strip().upper(), value.strip())
    return headers


def is_vendor_response(response: str) -> bool:
    return _VENDOR_MARKER.search(response) is not None


def parse_search_response(response: str, control_port: int = DEFAULT_CONTROL_PORT) -> Device | None:
    if not is_vendor_response(response):
        return None

    headers = parse_headers(response)

    location = headers.get("LOCATION", "")
    try:
        host = urlsplit(location).hostname
    except ValueError:
        host = None
    if not host:
        logger.debug("Ignoring reply without usable LOCATION: %r", location)
        return None

    usn = headers.get("USN", "")
    name = VENDOR_DEVICE_NAME if _VENDOR_MARKER.search(usn) else DEFAULT_DEVICE_NAME

    return Device(
        name=name,
        host=host,
        port=control_port,
        model=headers.get("SERVER") or None,
    )
