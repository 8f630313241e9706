import asyncio
import json
import os
import sys

import pytest

import webos_remote.cli as cli
from webos_remote.domain.control import DeviceControlClient
from webos_remote.domain.device import Device

from conftest import FakeControlTransport, InMemoryCredentialStore, settle


class TestParser:
    def test_send_accepts_multiple_commands(self):
        args = cli.build_parser().parse_args(["send", "192.168.1.50", "volume-up", "mute"])
        assert args.command == "send"
        assert args.host == "192.168.1.50"
        assert args.names == ["volume-up", "mute"]

    def test_launch(self):
        args = cli.build_parser().parse_args(["-v", "launch", "10.0.0.2", "netflix"])
        assert args.verbose
        assert args.app_id == "netflix"


class TestMain:
    def test_commands_lists_every_command(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setattr(cli, "ENV_FILE_PATH", tmp_path / "missing")
        monkeypatch.setattr(sys, "argv", ["webos-remote", "commands"])

        cli.main()

        output = capsys.readouterr().out
        assert "volume-up" in output
        assert "ssap://audio/volumeUp" in output
        assert "number-9" in output

    def test_unknown_command_name_exits_before_connecting(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setattr(cli, "ENV_FILE_PATH", tmp_path / "missing")
        monkeypatch.setattr(sys, "argv", ["webos-remote", "send", "192.168.1.50", "warp-speed"])

        with pytest.raises(SystemExit) as exc_info:
            cli.main()

        assert exc_info.value.code == 2
        assert "Unknown command: warp-speed" in capsys.readouterr().err

    def test_forget_removes_credential(self, monkeypatch, capsys, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text(json.dumps({"192.168.1.50": "abc"}))
        monkeypatch.setattr(cli, "ENV_FILE_PATH", tmp_path / "missing")
        monkeypatch.setenv("WEBOS_REMOTE_CREDENTIALS_FILE", str(credentials))
        monkeypatch.setattr(sys, "argv", ["webos-remote", "forget", "192.168.1.50"])

        cli.main()

        assert "Credential removed" in capsys.readouterr().out
        assert json.loads(credentials.read_text()) == {}


class TestEnvFile:
    def test_loads_missing_keys_only(self, monkeypatch, tmp_path):
        env_file = tmp_path / "env"
        env_file.write_text(
            "# comment\n"
            "WEBOS_REMOTE_TEST_ONE='from-file'\n"
            "WEBOS_REMOTE_TEST_TWO=from-file\n"
            "not a setting\n"
        )
        monkeypatch.setattr(cli, "ENV_FILE_PATH", env_file)
        monkeypatch.delenv("WEBOS_REMOTE_TEST_ONE", raising=False)
        monkeypatch.setenv("WEBOS_REMOTE_TEST_TWO", "from-env")

        cli._load_env_file()

        assert os.environ["WEBOS_REMOTE_TEST_ONE"] == "from-file"
        assert os.environ["WEBOS_REMOTE_TEST_TWO"] == "from-env"
        monkeypatch.delenv("WEBOS_REMOTE_TEST_ONE")


class TestPairHelper:
    @pytest.mark.asyncio
    async def test_returns_true_once_registered(self):
        transport = FakeControlTransport()
        client = DeviceControlClient(
            Device.manual("192.168.1.50"),
            transport,
            InMemoryCredentialStore({"192.168.1.50": "stored"}),
            registration_delay=0.0,
        )

        async def tv_accepts():
            await settle()
            transport.feed({"type": "registered", "id": "1", "payload": {"client-key": "stored"}})

        accept = asyncio.create_task(tv_accepts())
        assert await cli.pair(client, timeout=2.0)
        await accept
        await client.disconnect()

    @pytest.mark.asyncio
    async def test_returns_false_on_error_frame(self):
        transport = FakeControlTransport()
        client = DeviceControlClient(
            Device.manual("192.168.1.50"),
            transport,
            InMemoryCredentialStore({"192.168.1.50": "stored"}),
            registration_delay=0.0,
        )

        async def tv_rejects():
            await settle()
            transport.feed({"type": "error", "id": "1", "error": "403 User denied access"})

        reject = asyncio.create_task(tv_rejects())
        assert not await cli.pair(client, timeout=2.0)
        await reject
        assert client.last_error == "403 User denied access"
        await client.disconnect()

    @pytest.mark.asyncio
    async def test_returns_false_when_unreachable(self):
        client = DeviceControlClient(
            Device.manual("192.168.1.50"),
            FakeControlTransport(fail_open=True),
            InMemoryCredentialStore(),
        )
        assert not await cli.pair(client, timeout=2.0)
