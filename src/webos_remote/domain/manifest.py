from webos_remote.domain.payload import JsonObject

DEFAULT_PERMISSIONS = [
    "TEST_SECURE",
    "CONTROL_INPUT_TEXT",
    "CONTROL_MOUSE_AND_KEYBOARD",
    "READ_INSTALLED_APPS",
    "READ_LGE_SDX",
    "READ_NOTIFICATIONS",
    "SEARCH",
    "WRITE_SETTINGS",
    "WRITE_NOTIFICATION_ALERT",
    "CONTROL_POWER",
    "READ_CURRENT_CHANNEL",
    "READ_RUNNING_APPS",
    "READ_UPDATE_INFO",
    "UPDATE_FROM_REMOTE_APP",
    "READ_LGE_TV_INPUT_EVENTS",
    "READ_TV_CURRENT_TIME",
]

DEFAULT_SERIAL = "2f930e2d2cfe083771f68e4fe7bb07"


def build_manifest(
    app_id: str = "com.lg.remote",
    vendor_id: str = "com.lg",
    app_name: str = "LG Remote",
    vendor_name: str = "LG Electronics",
    app_version: str = "1.0.0",
    created: str = "20250101",
    serial: str = DEFAULT_SERIAL,
    permissions: list[str] | None = None,
) -> JsonObject:
    return {
        "manifestVersion": 1,
        "appVersion": app_version,
        "signed": {
            "created": created,
            "appId": app_id,
            "vendorId": vendor_id,
            "localizedAppNames": {"": app_name},
            "localizedVendorNames": {"": vendor_name},
            "permissions": list(permissions or DEFAULT_PERMISSIONS),
            "serial": serial,
        },
    }
