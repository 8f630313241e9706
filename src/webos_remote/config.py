from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path.home() / ".config" / "webos-remote"


class WebOsRemoteConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEBOS_REMOTE_")

    ssdp_address: str = "239.255.255.250"
    ssdp_port: int = 1900
    ssdp_ttl: int = 2
    search_target: str = "urn:lge-com:service:webos-second-screen:1"
    search_mx: int = 3
    scan_window_seconds: float = 5.0

    control_port: int = 3000
    registration_delay_seconds: float = 0.5
    probe_timeout_seconds: float = 2.0
    pairing_timeout_seconds: float = 60.0

    credentials_file: str = str(CONFIG_DIR / "credentials.json")

    client_app_id: str = "com.lg.remote"
    client_vendor_id: str = "com.lg"
    client_app_name: str = "LG Remote"
    client_vendor_name: str = "LG Electronics"
    client_version: str = "1.0.0"

    log_file: str = ""
