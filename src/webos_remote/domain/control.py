import asyncio
import contextlib
import logging
from dataclasses import replace

from webos_remote.domain.commands import INPUT_CONFIRM_URI, LAUNCH_APP_URI, Command, CommandKind
from webos_remote.domain.device import Device
from webos_remote.domain.events import (
    CommandFailed,
    ErrorReceived,
    EventBus,
    EventCallback,
    PairingCompleted,
    StateChanged,
)
from webos_remote.domain.frames import (
    ERROR,
    REGISTERED,
    RESPONSE,
    Frame,
    FrameDecodeError,
    build_register_frame,
    build_request_frame,
    decode_frame,
    payload_value,
)
from webos_remote.domain.manifest import build_manifest
from webos_remote.domain.payload import JsonObject, PayloadTypeError
from webos_remote.domain.state import ConnectionState, ConnectionStatus, validate_transition
from webos_remote.ports.credentials import CredentialStorePort
from webos_remote.ports.transport import ControlTransportPort, TransportError

logger = logging.getLogger(__name__)

REGISTRATION_DELAY_SECONDS = 0.5
PROBE_TIMEOUT_SECONDS = 2.0


class DeviceControlClient:
    def __init__(
        self,
        device: Device,
        transport: ControlTransportPort,
        credentials: CredentialStorePort,
        manifest: JsonObject | None = None,
        registration_delay: float = REGISTRATION_DELAY_SECONDS,
    ) -> None:
        self._device = device
        self._transport = transport
        self._credentials = credentials
        self._manifest = manifest or build_manifest()
        self._registration_delay = registration_delay
        self._events = EventBus()

        self._status = ConnectionStatus()
        self._request_id = 0
        self._receive_task: asyncio.Task | None = None
        self._registration_task: asyncio.Task | None = None

        self._client_key = credentials.load(device.host)
        if self._client_key:
            logger.debug("Loaded pairing credential for %s", device.host)

    @property
    def device(self) -> Device:
        return self._device

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def state(self) -> ConnectionState:
        return self._status.state

    @property
    def connected(self) -> bool:
        return self._status.connected

    @property
    def paired(self) -> bool:
        return self._status.paired

    @property
    def last_error(self) -> str | None:
        return self._status.last_error

    @property
    def client_key(self) -> str | None:
        return self._client_key

    def subscribe(self, callback: EventCallback):
        return self._events.subscribe(callback)

    def _transition_to(self, target: ConnectionState) -> None:
        previous = self._status.state
        if previous == target:
            return
        validate_transition(previous, target)
        logger.info("State: %s -> %s (%s)", previous.name, target.name, self._device.host)
        self._status = replace(self._status, state=target)
        self._events.publish(StateChanged(host=self._device.host, previous=previous, current=target))

    def _record_error(self, message: str) -> None:
        self._status = replace(self._status, last_error=message)

    async def connect(self) -> None:
        if self._status.state != ConnectionState.IDLE:
            await self.disconnect()

        self._status = ConnectionStatus()
        self._request_id = 0
        self._transition_to(ConnectionState.CONNECTING)

        url = self._device.websocket_url
        logger.info("Connecting to %s", url)
        try:
            await self._transport.open(url)
        except TransportError as exc:
            self._record_error(str(exc))
            logger.error("Connection to %s failed: %s", url, exc)
            self._transition_to(ConnectionState.IDLE)
            return
        except asyncio.CancelledError:
            if self._status.state == ConnectionState.CONNECTING:
                self._transition_to(ConnectionState.IDLE)
            raise

        if self._status.state != ConnectionState.CONNECTING:
            # disconnect() ran while the transport was opening
            await self._transport.close()
            return

        self._transition_to(ConnectionState.CONNECTED_UNPAIRED)
        self._receive_task = asyncio.create_task(self._receive_loop())
        self._registration_task = asyncio.create_task(self._register_after_delay())

    async def disconnect(self) -> None:
        registration_task, self._registration_task = self._registration_task, None
        if registration_task is not None and not registration_task.done():
            registration_task.cancel()

        await self._transport.close()

        receive_task, self._receive_task = self._receive_task, None
        if (
            receive_task is not None
            and receive_task is not asyncio.current_task()
            and not receive_task.done()
        ):
            receive_task.cancel()
            try:
                await receive_task
            except asyncio.CancelledError:
                pass

        if self._status.state != ConnectionState.IDLE:
            self._transition_to(ConnectionState.IDLE)

    async def probe(self, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
        connect_task = asyncio.create_task(self.connect())
        await asyncio.sleep(timeout)
        if not connect_task.done():
            connect_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await connect_task

        reachable = self.connected or self.paired
        logger.info("Probe of %s: %s", self._device.host, "reachable" if reachable else "unreachable")
        return reachable

    async def send_command(self, command: Command) -> bool:
        if not self.paired:
            logger.warning("Cannot send %s: not paired with %s", command.name, self._device.host)
            return False

        kind = command.kind
        if kind is CommandKind.NAVIGATION:
            return await self._send_request(INPUT_CONFIRM_URI)
        if kind is CommandKind.APP:
            return await self.launch_app(command.value)
        return await self._send_request(command.value)

    async def launch_app(self, app_id: str) -> bool:
        if not self.paired:
            logger.warning("Cannot launch %s: not paired with %s", app_id, self._device.host)
            return False
        return await self._send_request(LAUNCH_APP_URI, {"id": app_id})

    async def send_enter_key(self) -> bool:
        if not self.paired:
            logger.warning("Cannot send enter key: not paired with %s", self._device.host)
            return False
        return await self._send_request(INPUT_CONFIRM_URI)

    def _next_request_id(self) -> str:
        self._request_id += 1
        return str(self._request_id)

    async def _send_request(self, uri: str, payload: JsonObject | None = None) -> bool:
        return await self._send_frame(build_request_frame(self._next_request_id(), uri, payload))

    async def _send_frame(self, frame: Frame) -> bool:
        try:
            text = frame.encode()
        except PayloadTypeError as exc:
            logger.error("Cannot encode %s frame: %s", frame.type, exc)
            return False

        try:
            await self._transport.send(text)
        except TransportError as exc:
            self._record_error(str(exc))
            logger.error("Send to %s failed: %s", self._device.host, exc)
            return False

        logger.debug("Sent %s id=%s uri=%s", frame.type, frame.id, frame.uri)
        return True

    async def _register_after_delay(self) -> None:
        await asyncio.sleep(self._registration_delay)
        if not self.connected:
            return

        frame = build_register_frame(self._next_request_id(), self._manifest, self._client_key)
        logger.info(
            "Registering with %s (%s)",
            self._device.host,
            "stored credential" if self._client_key else "pairing prompt on TV",
        )
        await self._send_frame(frame)

    async def _receive_loop(self) -> None:
        try:
            async for text in self._transport.messages():
                self._dispatch(text)
        except TransportError as exc:
            self._record_error(str(exc))
            logger.error("Receive from %s failed: %s", self._device.host, exc)

        logger.info("Connection to %s closed", self._device.host)
        self._handle_closed()

    def _handle_closed(self) -> None:
        registration_task, self._registration_task = self._registration_task, None
        if registration_task is not None and not registration_task.done():
            registration_task.cancel()
        self._receive_task = None
        if self._status.state != ConnectionState.IDLE:
            self._transition_to(ConnectionState.IDLE)

    def _dispatch(self, text: str) -> None:
        try:
            frame = decode_frame(text)
        except FrameDecodeError as exc:
            logger.debug("Dropping malformed frame: %s", exc)
            return

        logger.debug("Received %s id=%s", frame.type, frame.id)
        if frame.type == REGISTERED:
            self._handle_registered(frame)
        elif frame.type == RESPONSE:
            self._handle_response(frame)
        elif frame.type == ERROR:
            self._handle_error(frame)

    def _handle_registered(self, frame: Frame) -> None:
        if self._status.state not in (ConnectionState.CONNECTED_UNPAIRED, ConnectionState.PAIRED):
            logger.debug("Ignoring registration while %s", self._status.state.name)
            return

        credential_stored = False
        client_key = payload_value(frame, "client-key")
        if isinstance(client_key, str) and client_key:
            self._client_key = client_key
            try:
                self._credentials.save(self._device.host, client_key)
                credential_stored = True
            except OSError as exc:
                logger.error("Could not store pairing credential for %s: %s", self._device.host, exc)

        self._transition_to(ConnectionState.PAIRED)
        logger.info("Paired with %s", self._device.host)
        self._events.publish(PairingCompleted(host=self._device.host, credential_stored=credential_stored))

    def _handle_response(self, frame: Frame) -> None:
        if payload_value(frame, "returnValue") is not False:
            return
        reason = payload_value(frame, "errorText")
        reason = reason if isinstance(reason, str) else ""
        logger.warning("Request %s failed on %s: %s", frame.id, self._device.host, reason or "no details")
        self._events.publish(CommandFailed(host=self._device.host, request_id=frame.id, reason=reason))

    def _handle_error(self, frame: Frame) -> None:
        if frame.error is None:
            return
        self._record_error(frame.error)
        logger.warning("Error from %s: %s", self._device.host, frame.error)
        self._events.publish(ErrorReceived(host=self._device.host, message=frame.error))
