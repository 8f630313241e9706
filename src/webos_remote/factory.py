import logging

from webos_remote.config import WebOsRemoteConfig
from webos_remote.adapters.json_credential_store import JsonCredentialStore
from webos_remote.adapters.ssdp_transport import SsdpDatagramTransport
from webos_remote.adapters.websocket_transport import WebSocketTransport
from webos_remote.domain.control import DeviceControlClient
from webos_remote.domain.device import Device
from webos_remote.domain.discovery import DeviceDiscovery
from webos_remote.domain.manifest import build_manifest
from webos_remote.domain.payload import JsonObject
from webos_remote.domain.ssdp import build_search_request

logger = logging.getLogger(__name__)


def create_manifest(config: WebOsRemoteConfig) -> JsonObject:
    return build_manifest(
        app_id=config.client_app_id,
        vendor_id=config.client_vendor_id,
        app_name=config.client_app_name,
        vendor_name=config.client_vendor_name,
        app_version=config.client_version,
    )


def create_credential_store(config: WebOsRemoteConfig) -> JsonCredentialStore:
    return JsonCredentialStore(config.credentials_file)


def create_discovery(config: WebOsRemoteConfig) -> DeviceDiscovery:
    transport = SsdpDatagramTransport(
        address=config.ssdp_address,
        port=config.ssdp_port,
        ttl=config.ssdp_ttl,
    )
    search_request = build_search_request(
        search_target=config.search_target,
        mx=config.search_mx,
        address=config.ssdp_address,
        port=config.ssdp_port,
    )
    return DeviceDiscovery(
        transport=transport,
        scan_window_seconds=config.scan_window_seconds,
        search_request=search_request,
        control_port=config.control_port,
    )


def create_device(config: WebOsRemoteConfig, host: str) -> Device:
    return Device.manual(host, port=config.control_port)


def create_control_client(
    config: WebOsRemoteConfig,
    device: Device,
    credentials: JsonCredentialStore | None = None,
) -> DeviceControlClient:
    logger.debug("Creating control client for %s", device.websocket_url)
    return DeviceControlClient(
        device=device,
        transport=WebSocketTransport(),
        credentials=credentials or create_credential_store(config),
        manifest=create_manifest(config),
        registration_delay=config.registration_delay_seconds,
    )
