import json
from dataclasses import dataclass

from webos_remote.domain.payload import JsonObject, JsonValue, PayloadTypeError, ensure_json_object

REGISTER = "register"
REGISTERED = "registered"
REQUEST = "request"
RESPONSE = "response"
ERROR = "error"


class FrameDecodeError(ValueError):
    pass


@dataclass(frozen=True)
class Frame:
    type: str
    id: str | None = None
    uri: str | None = None
    payload: JsonObject | None = None
    error: str | None = None

    def encode(self) -> str:
        message: JsonObject = {"type": self.type}
        if self.id is not None:
            message["id"] = self.id
        if self.uri is not None:
            message["uri"] = self.uri
        if self.payload is not None:
            message["payload"] = ensure_json_object(self.payload)
        if self.error is not None:
            message["error"] = self.error
        return json.dumps(message, separators=(",", ":"), ensure_ascii=False)


def decode_frame(text: str | bytes) -> Frame:
    try:
        message = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FrameDecodeError(f"Frame is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise FrameDecodeError("Frame is nested too deeply") from exc

    if not isinstance(message, dict):
        raise FrameDecodeError("Frame is not a JSON object")

    frame_type = message.get("type")
    if not isinstance(frame_type, str) or not frame_type:
        raise FrameDecodeError("Frame has no type")

    frame_id = message.get("id")
    if isinstance(frame_id, (int, float)) and not isinstance(frame_id, bool):
        frame_id = str(frame_id)
    elif not isinstance(frame_id, str):
        frame_id = None

    uri = message.get("uri")
    error = message.get("error")

    payload = message.get("payload")
    try:
        payload = ensure_json_object(payload) if isinstance(payload, dict) else None
    except PayloadTypeError as exc:
        raise FrameDecodeError(str(exc)) from exc
    except RecursionError as exc:
        raise FrameDecodeError("Frame payload is nested too deeply") from exc

    return Frame(
        type=frame_type,
        id=frame_id,
        uri=uri if isinstance(uri, str) else None,
        payload=payload,
        error=error if isinstance(error, str) else None,
    )


def build_register_frame(frame_id: str, manifest: JsonObject, client_key: str | None = None) -> Frame:
    payload: JsonObject = {
        "forcePairing": False,
        "pairingType": "PROMPT",
        "manifest": manifest,
    }
    if client_key:
        payload["client-key"] = client_key
    return Frame(type=REGISTER, id=frame_id, payload=payload)


def build_request_frame(frame_id: str, uri: str, payload: JsonObject | None = None) -> Frame:
    return Frame(type=REQUEST, id=frame_id, uri=uri, payload=payload)


def payload_value(frame: Frame, key: str) -> JsonValue:
    if frame.payload is None:
        return None
    return frame.payload.get(key)
