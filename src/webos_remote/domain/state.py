from dataclasses import dataclass
from enum import Enum, auto


class ConnectionState(Enum):
    IDLE = auto()
    CONNECTING = auto()
    CONNECTED_UNPAIRED = auto()
    PAIRED = auto()


VALID_TRANSITIONS: dict[ConnectionState, set[ConnectionState]] = {
    ConnectionState.IDLE: {ConnectionState.CONNECTING},
    ConnectionState.CONNECTING: {ConnectionState.CONNECTED_UNPAIRED, ConnectionState.IDLE},
    ConnectionState.CONNECTED_UNPAIRED: {ConnectionState.PAIRED, ConnectionState.IDLE},
    ConnectionState.PAIRED: {ConnectionState.IDLE},
}


class InvalidTransitionError(Exception):
    pass


def validate_transition(current: ConnectionState, target: ConnectionState) -> None:
    if target not in VALID_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot transition from {current.name} to {target.name}")


@dataclass(frozen=True)
class ConnectionStatus:
    state: ConnectionState = ConnectionState.IDLE
    last_error: str | None = None

    @property
    def connected(self) -> bool:
        return self.state in (ConnectionState.CONNECTED_UNPAIRED, ConnectionState.PAIRED)

    @property
    def paired(self) -> bool:
        return self.state == ConnectionState.PAIRED
