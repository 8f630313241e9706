import asyncio
import logging
import socket
from collections.abc import AsyncIterator

from webos_remote.domain.ssdp import SSDP_ADDRESS, SSDP_PORT
from webos_remote.ports.transport import TransportError

logger = logging.getLogger(__name__)


class _SsdpProtocol(asyncio.DatagramProtocol):
    def __init__(self, queue: asyncio.Queue[bytes | None]) -> None:
        self._queue = queue

    def datagram_received(self, data: bytes, addr: tuple) -> None:
        logger.debug("SSDP reply from %s (%d bytes)", addr[0], len(data))
        self._queue.put_nowait(data)

    def error_received(self, exc: Exception) -> None:
        logger.debug("SSDP socket error: %s", exc)

    def connection_lost(self, exc: Exception | None) -> None:
        self._queue.put_nowait(None)


class SsdpDatagramTransport:
    def __init__(
        self,
        address: str = SSDP_ADDRESS,
        port: int = SSDP_PORT,
        ttl: int = 2,
    ) -> None:
        self._address = address
        self._port = port
        self._ttl = ttl
        self._transport: asyncio.DatagramTransport | None = None
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue()

    async def open(self) -> None:
        if self._transport is not None:
            await self.close()

        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        queue = self._queue

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self._ttl)
            sock.bind(("", 0))
            sock.setblocking(False)
            self._transport, _ = await loop.create_datagram_endpoint(
                lambda: _SsdpProtocol(queue),
                sock=sock,
            )
        except OSError as exc:
            sock.close()
            raise TransportError(f"Cannot open SSDP socket: {exc}") from exc
        logger.debug("SSDP socket open")

    async def send(self, data: bytes) -> None:
        if self._transport is None:
            raise TransportError("SSDP socket is not open")
        try:
            self._transport.sendto(data, (self._address, self._port))
        except OSError as exc:
            raise TransportError(f"Cannot send SSDP search: {exc}") from exc
        logger.info("SSDP search sent to %s:%d", self._address, self._port)

    async def datagrams(self) -> AsyncIterator[bytes]:
        queue = self._queue
        while True:
            data = await queue.get()
            if data is None:
                return
            yield data

    async def close(self) -> None:
        transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()
            logger.debug("SSDP socket closed")
