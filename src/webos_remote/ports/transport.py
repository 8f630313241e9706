from typing import Protocol, AsyncIterator


class TransportError(Exception):
    pass


class ControlTransportPort(Protocol):
    async def open(self, url: str) -> None: ...
    async def send(self, text: str) -> None: ...
    def messages(self) -> AsyncIterator[str]: ...
    async def close(self) -> None: ...


class DatagramTransportPort(Protocol):
    async def open(self) -> None: ...
    async def send(self, data: bytes) -> None: ...
    def datagrams(self) -> AsyncIterator[bytes]: ...
    async def close(self) -> None: ...
