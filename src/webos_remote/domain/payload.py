# Payloads are checked against the closed set of JSON types before encoding.
JsonValue = None | bool | int | float | str | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject = dict[str, JsonValue]


class PayloadTypeError(TypeError):
    pass


def ensure_json_value(value: object) -> JsonValue:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [ensure_json_value(item) for item in value]
    if isinstance(value, dict):
        result: JsonObject = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise PayloadTypeError(f"Payload keys must be strings, got {type(key).__name__}")
            result[key] = ensure_json_value(item)
        return result
    raise PayloadTypeError(f"Unsupported payload value of type {type(value).__name__}")


def ensure_json_object(value: object) -> JsonObject:
    if not isinstance(value, dict):
        raise PayloadTypeError(f"Payload must be an object, got {type(value).__name__}")
    return ensure_json_value(value)  # type: ignore[return-value]
