import uuid
from dataclasses import dataclass, field

DEFAULT_CONTROL_PORT = 3000
DEFAULT_DEVICE_NAME = "LG webOS TV"


@dataclass(frozen=True)
class Device:
    name: str = field(compare=False)
    host: str = field(compare=False)
    port: int = field(default=DEFAULT_CONTROL_PORT, compare=False)
    model: str | None = field(default=None, compare=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def websocket_url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    @classmethod
    def manual(cls, host: str, port: int = DEFAULT_CONTROL_PORT) -> "Device":
        return cls(name=DEFAULT_DEVICE_NAME, host=host, port=port)
