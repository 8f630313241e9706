import asyncio
import logging
from collections.abc import AsyncIterator

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException
from websockets.frames import CloseCode

from webos_remote.ports.transport import TransportError

logger = logging.getLogger(__name__)


class WebSocketTransport:
    def __init__(
        self,
        open_timeout: float | None = None,
        ping_interval: float | None = 20.0,
        max_size: int | None = 2**20,
    ) -> None:
        self._open_timeout = open_timeout
        self._ping_interval = ping_interval
        self._max_size = max_size
        self._connection: ClientConnection | None = None

    async def open(self, url: str) -> None:
        if self._connection is not None:
            await self.close()
        try:
            self._connection = await connect(
                url,
                open_timeout=self._open_timeout,
                ping_interval=self._ping_interval,
                max_size=self._max_size,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            raise TransportError(f"Cannot connect to {url}: {exc}") from exc
        logger.info("WebSocket connected to %s", url)

    async def send(self, text: str) -> None:
        connection = self._connection
        if connection is None:
            raise TransportError("WebSocket is not connected")
        try:
            await connection.send(text)
        except (OSError, WebSocketException) as exc:
            raise TransportError(f"Send failed: {exc}") from exc

    async def messages(self) -> AsyncIterator[str]:
        connection = self._connection
        if connection is None:
            return
        try:
            async for message in connection:
                if isinstance(message, bytes):
                    try:
                        message = message.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.debug("Dropping non UTF-8 binary frame (%d bytes)", len(message))
                        continue
                yield message
        except ConnectionClosedError as exc:
            logger.info("WebSocket closed abnormally: %s", exc)
        except ConnectionClosed:
            pass

    async def close(self) -> None:
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            await connection.close(code=CloseCode.GOING_AWAY)
        except (OSError, WebSocketException) as exc:
            logger.debug("Error while closing WebSocket: %s", exc)
        logger.info("WebSocket closed")
