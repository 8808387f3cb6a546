"""JSON encoding and decoding backed by ``msgspec``."""

from typing import Any, Literal, Union, overload

import msgspec

from sqlbind.exceptions import SerializationError

__all__ = ("decode_json", "encode_json")


def _default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_default)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to JSON.

    Args:
        data: Data to encode.
        as_bytes: Return the raw UTF-8 bytes instead of a string.

    Raises:
        SerializationError: If the data cannot be encoded.

    Returns:
        JSON representation of ``data``.
    """
    try:
        encoded = _encoder.encode(data)
    except (TypeError, msgspec.EncodeError) as e:
        msg = f"Unable to encode {type(data).__name__} to JSON"
        raise SerializationError(msg) from e
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def decode_json(data: Union[str, bytes], *, decode_bytes: bool = True) -> Any:
    """Decode JSON text.

    Args:
        data: JSON string or bytes.
        decode_bytes: When ``False``, bytes input is returned unchanged.

    Raises:
        SerializationError: If the input is not valid JSON.

    Returns:
        Decoded Python object.
    """
    if isinstance(data, bytes) and not decode_bytes:
        return data
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as e:
        msg = "Invalid JSON document"
        raise SerializationError(msg) from e
