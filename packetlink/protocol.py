"""Wire format shared by the client and the server.

Every frame is ``[op_code:int32][size:int32][payload:size bytes]``. A packet
payload is a sequence of ``[length:int32][bytes:length]`` entries.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

INT_STRUCT = struct.Struct("<i")
HEADER_STRUCT = struct.Struct("<ii")


class OpCode(IntEnum):
    """Operation carried by a frame."""

    MESSAGE = 0
    PACKET = 1


def _as_bytes(value: str | bytes | bytearray) -> bytes:
    if isinstance(value, str):
        # Strings travel NUL-terminated, as the peer reads them as C strings.
        return value.encode("utf-8") + b"\0"
    return bytes(value)


@dataclass
class Packet:
    """A frame under construction: an op code and its payload."""

    op_code: OpCode = OpCode.PACKET
    payload: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes | bytearray) -> None:
        """Append a length-prefixed value; strings get a trailing NUL."""
        data = _as_bytes(value)
        self.payload += INT_STRUCT.pack(len(data))
        self.payload += data

    def serialize(self) -> bytes:
        """Return the frame as it goes on the wire."""
        return HEADER_STRUCT.pack(int(self.op_code), len(self.payload)) + bytes(self.payload)


def encode_message(message: str | bytes) -> bytes:
    """Build a MESSAGE frame holding ``message`` as a NUL-terminated string."""
    data = _as_bytes(message)
    if isinstance(message, (bytes, bytearray)) and not data.endswith(b"\0"):
        data += b"\0"
    return Packet(OpCode.MESSAGE, bytearray(data)).serialize()


def decode_values(payload: bytes) -> list[str]:
    """Split a packet payload into its values.

    Each value is read as a C string: it ends at its first NUL byte.
    Raises ValueError when an entry is truncated or has a negative length.
    """
    values: list[str] = []
    view = memoryview(payload)
    offset = 0
    while offset < len(view):
        if offset + INT_STRUCT.size > len(view):
            raise ValueError("truncated length prefix in packet payload")
        (length,) = INT_STRUCT.unpack_from(view, offset)
        offset += INT_STRUCT.size
        if length < 0:
            raise ValueError(f"negative value length {length} in packet payload")
        if offset + length > len(view):
            raise ValueError("truncated value in packet payload")
        raw = bytes(view[offset : offset + length])
        offset += length
        values.append(raw.split(b"\0", 1)[0].decode("utf-8", errors="replace"))
    return values