import base64
import binascii

BytesLike = bytes | bytearray | memoryview | str


def to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def encode(data: BytesLike) -> str:
    return base64.b64encode(to_bytes(data)).decode("ascii")


def encode_optional(data: BytesLike | None) -> str | None:
    # None stays None so it goes over the wire as a JSON null marker
    if data is None:
        return None
    return encode(data)


def decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise ValueError(f"expected a Base64 string, got {type(text).__name__}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid Base64 payload: {e}") from e


def decode_optional(text: str | None) -> bytes | None:
    if text is None:
        return None
    return decode(text)
