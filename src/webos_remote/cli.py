import argparse
import asyncio
import logging
import os
import sys

from webos_remote.config import CONFIG_DIR, WebOsRemoteConfig
from webos_remote.domain.commands import Command, UnknownCommandError
from webos_remote.domain.control import DeviceControlClient
from webos_remote.domain.events import DomainEvent, ErrorReceived, PairingCompleted, StateChanged
from webos_remote.domain.state import ConnectionState
from webos_remote.log_format import configure_logging

ENV_FILE_PATH = CONFIG_DIR / "env"
RESPONSE_GRACE_SECONDS = 0.5

logger = logging.getLogger(__name__)


def _load_env_file() -> None:
    if not ENV_FILE_PATH.exists():
        return
    with open(ENV_FILE_PATH) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            value = value.strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discover and remote-control LG webOS TVs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("discover", help="Scan the local network for TVs")
    subparsers.add_parser("commands", help="List remote-control command names")

    probe_parser = subparsers.add_parser("probe", help="Check that a TV accepts connections")
    probe_parser.add_argument("host", help="TV address")

    pair_parser = subparsers.add_parser("pair", help="Pair with a TV and store the credential")
    pair_parser.add_argument("host", help="TV address")

    send_parser = subparsers.add_parser("send", help="Send one or more commands")
    send_parser.add_argument("host", help="TV address")
    send_parser.add_argument("names", nargs="+", help="Command names, e.g. volume-up")

    launch_parser = subparsers.add_parser("launch", help="Launch an app by id")
    launch_parser.add_argument("host", help="TV address")
    launch_parser.add_argument("app_id", help="Application id, e.g. netflix")

    forget_parser = subparsers.add_parser("forget", help="Delete the stored credential for a TV")
    forget_parser.add_argument("host", help="TV address")

    return parser


def main() -> None:
    _load_env_file()
    parser = build_parser()
    args = parser.parse_args()

    config = WebOsRemoteConfig()
    configure_logging(verbose=args.verbose, log_file=config.log_file)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    if args.command == "commands":
        for command in Command:
            print(f"{command.cli_name:<14} {command.value}")
        return

    if args.command == "forget":
        from webos_remote.factory import create_credential_store

        removed = create_credential_store(config).forget(args.host)
        print("Credential removed" if removed else f"No credential stored for {args.host}")
        return

    try:
        exit_code = asyncio.run(_run_command(args, config))
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)


async def _run_command(args: argparse.Namespace, config: WebOsRemoteConfig) -> int:
    from webos_remote.factory import create_control_client, create_device, create_discovery

    if args.command == "discover":
        discovery = create_discovery(config)
        await discovery.start_discovery()
        devices = await discovery.wait_finished()
        if discovery.last_error:
            print(f"Discovery failed: {discovery.last_error}", file=sys.stderr)
            return 1
        if not devices:
            print("No TVs found", file=sys.stderr)
            return 1
        for device in devices:
            print(f"{device.host:<16} {device.name:<14} {device.model or '-'}")
        return 0

    commands: list[Command] = []
    if args.command == "send":
        try:
            commands = [Command.from_name(name) for name in args.names]
        except UnknownCommandError as exc:
            print(str(exc), file=sys.stderr)
            return 2

    client = create_control_client(config, create_device(config, args.host))

    if args.command == "probe":
        reachable = await client.probe(timeout=config.probe_timeout_seconds)
        await client.disconnect()
        print("reachable" if reachable else "unreachable")
        return 0 if reachable else 1

    try:
        if not await pair(client, timeout=config.pairing_timeout_seconds):
            reason = client.last_error or "pairing was not confirmed"
            print(f"Could not pair with {args.host}: {reason}", file=sys.stderr)
            return 1

        if args.command == "pair":
            print(f"Paired with {args.host}")
            return 0

        if args.command == "launch":
            sent = await client.launch_app(args.app_id)
            await asyncio.sleep(RESPONSE_GRACE_SECONDS)
            return 0 if sent else 1

        if args.command == "send":
            return await _send_commands(client, commands)

        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2
    finally:
        await client.disconnect()


async def pair(client: DeviceControlClient, timeout: float) -> bool:
    finished = asyncio.Event()

    def on_event(event: DomainEvent) -> None:
        if isinstance(event, (PairingCompleted, ErrorReceived)):
            finished.set()
        elif isinstance(event, StateChanged) and event.current is ConnectionState.IDLE:
            finished.set()

    unsubscribe = client.subscribe(on_event)
    try:
        await client.connect()
        if not client.connected:
            return False
        if not client.client_key:
            print("Accept the pairing request on the TV screen...", file=sys.stderr)
        try:
            await asyncio.wait_for(finished.wait(), timeout)
        except asyncio.TimeoutError:
            logger.warning("No pairing confirmation from %s after %.0fs", client.device.host, timeout)
    finally:
        unsubscribe()
    return client.paired


async def _send_commands(client: DeviceControlClient, commands: list[Command]) -> int:
    failures = 0
    for command in commands:
        if not await client.send_command(command):
            failures += 1
    await asyncio.sleep(RESPONSE_GRACE_SECONDS)
    return 1 if failures else 0
