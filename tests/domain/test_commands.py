import pytest

from webos_remote.domain.commands import Command, CommandKind, UnknownCommandError


class TestCommandKinds:
    @pytest.mark.parametrize(
        "command",
        [Command.UP, Command.DOWN, Command.LEFT, Command.RIGHT, Command.OK, Command.BACK, Command.HOME],
    )
    def test_navigation_commands(self, command):
        assert command.kind is CommandKind.NAVIGATION

    @pytest.mark.parametrize("command", [Command.NETFLIX, Command.YOUTUBE, Command.HULU])
    def test_app_commands(self, command):
        assert command.kind is CommandKind.APP

    def test_volume_is_generic(self):
        assert Command.VOLUME_UP.kind is CommandKind.GENERIC
        assert Command.VOLUME_UP.value == "ssap://audio/volumeUp"

    def test_digits_are_generic(self):
        assert Command.NUMBER_7.kind is CommandKind.GENERIC
        assert Command.NUMBER_7.value == "7"

    def test_ok_maps_to_enter_opcode(self):
        assert Command.OK.value == "ENTER"


class TestCommandLookup:
    def test_cli_name(self):
        assert Command.FAST_FORWARD.cli_name == "fast-forward"

    def test_from_name_accepts_cli_name(self):
        assert Command.from_name("volume-up") is Command.VOLUME_UP

    def test_from_name_is_case_insensitive(self):
        assert Command.from_name("Channel_Down") is Command.CHANNEL_DOWN

    def test_every_command_round_trips_by_name(self):
        for command in Command:
            assert Command.from_name(command.cli_name) is command

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownCommandError):
            Command.from_name("self-destruct")
