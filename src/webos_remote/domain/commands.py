from enum import Enum, auto

INPUT_CONFIRM_URI = "ssap://com.webos.service.ime/sendEnterKey"
LAUNCH_APP_URI = "ssap://system.launcher/launch"

# The TV exposes no per-direction request on this socket, so every
# navigation key is sent as the input confirmation request.
_NAVIGATION_OPCODES = frozenset({"UP", "DOWN", "LEFT", "RIGHT", "ENTER", "BACK", "HOME"})
_APP_OPCODES = frozenset({"netflix", "youtube.leanback.v4", "hulu"})


class CommandKind(Enum):
    NAVIGATION = auto()
    APP = auto()
    GENERIC = auto()


class UnknownCommandError(Exception):
    pass


class Command(Enum):
    POWER_ON = "ssap://system/turnOn"
    POWER_OFF = "ssap://system/turnOff"

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    OK = "ENTER"
    BACK = "BACK"
    HOME = "HOME"

    VOLUME_UP = "ssap://audio/volumeUp"
    VOLUME_DOWN = "ssap://audio/volumeDown"
    MUTE = "ssap://audio/setMute"

    CHANNEL_UP = "ssap://tv/channelUp"
    CHANNEL_DOWN = "ssap://tv/channelDown"

    PLAY = "ssap://media.controls/play"
    PAUSE = "ssap://media.controls/pause"
    STOP = "ssap://media.controls/stop"
    REWIND = "ssap://media.controls/rewind"
    FAST_FORWARD = "ssap://media.controls/fastForward"

    NETFLIX = "netflix"
    YOUTUBE = "youtube.leanback.v4"
    HULU = "hulu"

    NUMBER_0 = "0"
    NUMBER_1 = "1"
    NUMBER_2 = "2"
    NUMBER_3 = "3"
    NUMBER_4 = "4"
    NUMBER_5 = "5"
    NUMBER_6 = "6"
    NUMBER_7 = "7"
    NUMBER_8 = "8"
    NUMBER_9 = "9"

    @property
    def kind(self) -> CommandKind:
        if self.value in _NAVIGATION_OPCODES:
            return CommandKind.NAVIGATION
        if self.value in _APP_OPCODES:
            return CommandKind.APP
        return CommandKind.GENERIC

    @property
    def cli_name(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_name(cls, name: str) -> "Command":
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise UnknownCommandError(f"Unknown command: {name}") from None
