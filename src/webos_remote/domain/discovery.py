import asyncio
import logging

from webos_remote.domain.device import DEFAULT_CONTROL_PORT, Device
from webos_remote.domain.events import (
    DeviceDiscovered,
    DiscoveryFailed,
    EventBus,
    EventCallback,
    ScanFinished,
    ScanStarted,
)
from webos_remote.domain.ssdp import build_search_request, parse_search_response
from webos_remote.ports.transport import DatagramTransportPort, TransportError

logger = logging.getLogger(__name__)

SCAN_WINDOW_SECONDS = 5.0


class DeviceDiscovery:
    def __init__(
        self,
        transport: DatagramTransportPort,
        scan_window_seconds: float = SCAN_WINDOW_SECONDS,
        search_request: bytes | None = None,
        control_port: int = DEFAULT_CONTROL_PORT,
    ) -> None:
        self._transport = transport
        self._scan_window_seconds = scan_window_seconds
        self._search_request = search_request or build_search_request()
        self._control_port = control_port
        self._events = EventBus()

        self._devices: list[Device] = []
        self._scanning = False
        self._last_error: str | None = None
        self._receive_task: asyncio.Task | None = None
        self._window_task: asyncio.Task | None = None
        self._finished = asyncio.Event()
        self._finished.set()

    @property
    def devices(self) -> list[Device]:
        return list(self._devices)

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def subscribe(self, callback: EventCallback):
        return self._events.subscribe(callback)

    async def start_discovery(self) -> None:
        if self._scanning:
            logger.debug("Discovery already running")
            return

        self._scanning = True
        self._devices.clear()
        self._last_error = None
        self._finished.clear()
        self._events.publish(ScanStarted())

        # The window bounds the scan even when the socket never comes up.
        self._window_task = asyncio.create_task(self._expire_after_window())

        try:
            await self._transport.open()
            if not self._scanning:
                await self._transport.close()
                return
            await self._transport.send(self._search_request)
        except TransportError as exc:
            self._last_error = str(exc)
            logger.error("Discovery setup failed: %s", exc)
            self._events.publish(DiscoveryFailed(reason=str(exc)))
            return

        # Stopped while the search was being sent
        if not self._scanning:
            await self._transport.close()
            return

        logger.info("Discovery started (window=%.1fs)", self._scan_window_seconds)
        self._receive_task = asyncio.create_task(self._receive_loop())

    async def stop_discovery(self) -> None:
        was_scanning = self._scanning
        self._scanning = False

        window_task, self._window_task = self._window_task, None
        if window_task is not None and window_task is not asyncio.current_task():
            window_task.cancel()

        await self._transport.close()

        receive_task, self._receive_task = self._receive_task, None
        if receive_task is not None and not receive_task.done():
            receive_task.cancel()
            try:
                await receive_task
            except asyncio.CancelledError:
                pass

        if was_scanning:
            logger.info("Discovery finished: %d device(s)", len(self._devices))
            self._events.publish(ScanFinished(devices=tuple(self._devices)))
        self._finished.set()

    async def wait_finished(self) -> list[Device]:
        await self._finished.wait()
        return self.devices

    def handle_datagram(self, data: bytes) -> Device | None:
        try:
            response = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Dropping undecodable datagram (%d bytes)", len(data))
            return None

        device = parse_search_response(response, control_port=self._control_port)
        if device is None:
            return None

        if any(existing.host == device.host for existing in self._devices):
            return None

        self._devices.append(device)
        logger.info("Found TV: %s at %s (%s)", device.name, device.host, device.model or "unknown model")
        self._events.publish(DeviceDiscovered(device=device))
        return device

    async def _receive_loop(self) -> None:
        async for datagram in self._transport.datagrams():
            try:
                self.handle_datagram(datagram)
            except Exception:
                logger.exception("Error handling discovery reply")
        logger.debug("Discovery receive loop ended")

    async def _expire_after_window(self) -> None:
        await asyncio.sleep(self._scan_window_seconds)
        await self.stop_discovery()
