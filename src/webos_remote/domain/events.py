import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time

from webos_remote.domain.device import Device
from webos_remote.domain.state import ConnectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    timestamp: float = field(default_factory=time)


@dataclass(frozen=True)
class ScanStarted(DomainEvent):
    pass


@dataclass(frozen=True)
class DeviceDiscovered(DomainEvent):
    device: Device | None = None


@dataclass(frozen=True)
class DiscoveryFailed(DomainEvent):
    reason: str = ""


@dataclass(frozen=True)
class ScanFinished(DomainEvent):
    devices: tuple[Device, ...] = ()


@dataclass(frozen=True)
class StateChanged(DomainEvent):
    host: str = ""
    previous: ConnectionState = ConnectionState.IDLE
    current: ConnectionState = ConnectionState.IDLE


@dataclass(frozen=True)
class PairingCompleted(DomainEvent):
    host: str = ""
    credential_stored: bool = False


@dataclass(frozen=True)
class CommandFailed(DomainEvent):
    host: str = ""
    request_id: str | None = None
    reason: str = ""


@dataclass(frozen=True)
class ErrorReceived(DomainEvent):
    host: str = ""
    message: str = ""


EventCallback = Callable[[DomainEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: list[EventCallback] = []

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: DomainEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber failed on %s", type(event).__name__)
