import asyncio
import json
from collections.abc import AsyncIterator

import pytest

from webos_remote.domain.control import DeviceControlClient
from webos_remote.domain.device import Device
from webos_remote.domain.discovery import DeviceDiscovery
from webos_remote.ports.transport import TransportError


TV_HOST = "192.168.1.50"


def make_ssdp_reply(
    location: str | None = "http://192.168.1.50:3000/",
    server: str = "Linux/4.4.84 UPnP/1.0 LG webOS",
    usn: str = "uuid:ee0e1ba7-5f3a-4cc0-aa4c-23fd1d1e2b11::LG-device",
    line_ending: str = "\r\n",
) -> bytes:
    lines = ["HTTP/1.1 200 OK", "CACHE-CONTROL: max-age=1800"]
    if location is not None:
        lines.append(f"LOCATION: {location}")
    lines.append(f"SERVER: {server}")
    lines.append("ST: urn:lge-com:service:webos-second-screen:1")
    lines.append(f"USN: {usn}")
    lines.extend(["", ""])
    return line_ending.join(lines).encode("utf-8")


async def settle(iterations: int = 5) -> None:
    for _ in range(iterations):
        await asyncio.sleep(0)
    await asyncio.sleep(0.01)


class FakeControlTransport:
    def __init__(self, fail_open: bool = False) -> None:
        self._fail_open = fail_open
        self._incoming: asyncio.Queue[str | None] = asyncio.Queue()
        self.fail_send = False
        self.opened_urls: list[str] = []
        self.sent: list[str] = []
        self.close_count = 0

    @property
    def sent_frames(self) -> list[dict]:
        return [json.loads(text) for text in self.sent]

    async def open(self, url: str) -> None:
        if self._fail_open:
            raise TransportError(f"Cannot connect to {url}: connection refused")
        self._incoming = asyncio.Queue()
        self.opened_urls.append(url)

    async def send(self, text: str) -> None:
        if self.fail_send:
            raise TransportError("Send failed: connection reset")
        self.sent.append(text)

    async def messages(self) -> AsyncIterator[str]:
        queue = self._incoming
        while True:
            text = await queue.get()
            if text is None:
                return
            yield text

    async def close(self) -> None:
        self.close_count += 1
        self._incoming.put_nowait(None)

    def feed(self, message: dict | str) -> None:
        text = message if isinstance(message, str) else json.dumps(message)
        self._incoming.put_nowait(text)

    def close_remotely(self) -> None:
        self._incoming.put_nowait(None)


class FakeDatagramTransport:
    def __init__(self, fail_open: bool = False) -> None:
        self._fail_open = fail_open
        self._incoming: asyncio.Queue[bytes | None] = asyncio.Queue()
        self.open_count = 0
        self.close_count = 0
        self.sent: list[bytes] = []

    async def open(self) -> None:
        if self._fail_open:
            raise TransportError("Cannot open SSDP socket: address in use")
        self._incoming = asyncio.Queue()
        self.open_count += 1

    async def send(self, data: bytes) -> None:
        self.sent.append(data)

    async def datagrams(self) -> AsyncIterator[bytes]:
        queue = self._incoming
        while True:
            data = await queue.get()
            if data is None:
                return
            yield data

    async def close(self) -> None:
        self.close_count += 1
        self._incoming.put_nowait(None)

    def feed(self, data: bytes) -> None:
        self._incoming.put_nowait(data)


class InMemoryCredentialStore:
    def __init__(self, credentials: dict[str, str] | None = None) -> None:
        self.credentials = dict(credentials or {})
        self.load_calls: list[str] = []

    def load(self, host: str) -> str | None:
        self.load_calls.append(host)
        return self.credentials.get(host)

    def save(self, host: str, client_key: str) -> None:
        self.credentials[host] = client_key

    def forget(self, host: str) -> bool:
        return self.credentials.pop(host, None) is not None


@pytest.fixture
def tv_device():
    return Device(name="LG TV", host=TV_HOST, model="LG webOS")


@pytest.fixture
def fake_control_transport():
    return FakeControlTransport()


@pytest.fixture
def fake_datagram_transport():
    return FakeDatagramTransport()


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def control_client(tv_device, fake_control_transport, credential_store):
    return DeviceControlClient(
        device=tv_device,
        transport=fake_control_transport,
        credentials=credential_store,
        registration_delay=0.0,
    )


@pytest.fixture
def discovery(fake_datagram_transport):
    return DeviceDiscovery(transport=fake_datagram_transport, scan_window_seconds=0.2)
