import json

MAX_MSG_BYTES = 2_000_000  # sanity cap


class TransportError(ValueError):
    """A frame that cannot be turned into a message dict."""


def encode_msg(obj: dict) -> str:
    payload = json.dumps(obj, separators=(",", ":"))
    if len(payload) > MAX_MSG_BYTES:
        raise TransportError(f"message too large: {len(payload)} bytes")
    return payload

def decode_msg(frame) -> dict:
    if isinstance(frame, (bytes, bytearray)):
        if len(frame) > MAX_MSG_BYTES:
            raise TransportError(f"bad message length: {len(frame)}")
        try:
            frame = frame.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransportError(f"frame is not utf-8: {e}") from e

    if len(frame) > MAX_MSG_BYTES:
        raise TransportError(f"bad message length: {len(frame)}")

    try:
        msg = json.loads(frame)
    except json.JSONDecodeError as e:
        raise TransportError(f"malformed json: {e}") from e

    if not isinstance(msg, dict):
        raise TransportError(f"expected an object, got {type(msg).__name__}")
    return msg
