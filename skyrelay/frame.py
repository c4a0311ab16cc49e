"""Wire format of relay frames and their validation."""

from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

PREAMBULE = 0x0ABC
POSTAMBULE = 0x0DEF
BUFFER_SIZE = 128
FROM_BYTE_POS = 2
FROM_MAIN_BYTE = 0xDE
FROM_DEVICE_BYTE = 0x6F
MAX_ARGS = 121

_HEADER = struct.Struct(">HBBB")
_TRAILER = struct.Struct(">H")
_PAYLOAD_OFFSET = _HEADER.size
_TRAILER_OFFSET = _HEADER.size + MAX_ARGS


class Command(enum.IntEnum):
    """Command identifiers known to the relay."""

    TELEMETRY = 0x20
    MOTOR_SPEED = 0x21
    STOP_SRV = 0x69

    @property
    def payload_size(self) -> int:
        """The payload size this command must carry."""
        return _PAYLOAD_SIZES[self]


_PAYLOAD_SIZES = {
    Command.TELEMETRY: 16,
    Command.MOTOR_SPEED: 32,
    Command.STOP_SRV: 4,
}


class ErrorCode(enum.IntEnum):
    """Reasons a frame is rejected."""

    BAD_PREAMBULE = 1
    BAD_FROM_BYTE = 2
    BAD_COMMANDID = 3
    BAD_POSTAMBULE = 4
    PAYLOAD_TOO_BIG = 5
    INCOHERENT_PAYLOAD = 6


class FrameError(ValueError):
    """Raised when a received buffer does not hold a well-formed frame."""

    def __init__(self, code: ErrorCode, frame: "Frame") -> None:
        super().__init__(f"frame check failed with code {int(code)} ({code_to_string(code)})")
        self.code = code
        self.frame = frame


def _check_range(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} must be between 0 and {maximum:#x}, got {value}")


@dataclass
class Frame:
    """One relay frame: header, fixed-size payload area and trailer."""

    command_id: int
    payload: bytes = b""
    payload_size: Optional[int] = None
    from_byte: int = FROM_DEVICE_BYTE
    preamble: int = PREAMBULE
    postamble: int = POSTAMBULE

    def __post_init__(self) -> None:
        self.payload = bytes(self.payload)
        if len(self.payload) > MAX_ARGS:
            raise ValueError(f"payload longer than {MAX_ARGS} bytes")
        if self.payload_size is None:
            self.payload_size = len(self.payload)
        _check_range("preamble", self.preamble, 0xFFFF)
        _check_range("postamble", self.postamble, 0xFFFF)
        _check_range("from_byte", self.from_byte, 0xFF)
        _check_range("command_id", self.command_id, 0xFF)
        _check_range("payload_size", self.payload_size, 0xFF)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Frame":
        """Decode a raw buffer of exactly BUFFER_SIZE bytes, without checking it."""
        data = bytes(data)
        if len(data) != BUFFER_SIZE:
            raise ValueError(f"a frame is {BUFFER_SIZE} bytes, got {len(data)}")
        preamble, from_byte, command_id, size = _HEADER.unpack_from(data, 0)
        if size < MAX_ARGS:
            payload = data[_PAYLOAD_OFFSET:_PAYLOAD_OFFSET + size]
        else:
            payload = b""
        (postamble,) = _TRAILER.unpack_from(data, _TRAILER_OFFSET)
        return cls(
            command_id=command_id,
            payload=payload,
            payload_size=size,
            from_byte=from_byte,
            preamble=preamble,
            postamble=postamble,
        )

    def to_bytes(self) -> bytes:
        """Encode the frame into its BUFFER_SIZE-byte wire form."""
        header = _HEADER.pack(self.preamble, self.from_byte, self.command_id, self.payload_size)
        return header + self.payload.ljust(MAX_ARGS, b"\0") + _TRAILER.pack(self.postamble)


def is_command_valid(command_id: int) -> bool:
    """Tell whether the command identifier is a known command."""
    return command_id in Command._value2member_map_


def check_param_size(command_id: int, size: int) -> bool:
    """Tell whether the payload size matches the one the command requires."""
    if not is_command_valid(command_id):
        return False
    return Command(command_id).payload_size == size


def check_frame(frame: Frame) -> Optional[ErrorCode]:
    """Return the first problem found in the frame, or None if it is valid."""
    if frame.preamble != PREAMBULE:
        return ErrorCode.BAD_PREAMBULE
    if frame.from_byte != FROM_DEVICE_BYTE:
        return ErrorCode.BAD_FROM_BYTE
    if not is_command_valid(frame.command_id):
        return ErrorCode.BAD_COMMANDID
    if frame.payload_size > MAX_ARGS:
        return ErrorCode.PAYLOAD_TOO_BIG
    if not check_param_size(frame.command_id, frame.payload_size):
        return ErrorCode.INCOHERENT_PAYLOAD
    if frame.postamble != POSTAMBULE:
        return ErrorCode.BAD_POSTAMBULE
    return None


def code_to_string(code: int) -> str:
    """Name an error code, or 'UNKNOWN' for anything else."""
    try:
        return ErrorCode(code).name
    except ValueError:
        return "UNKNOWN"


def format_frame(frame: Frame) -> str:
    """Render every field of a frame as text."""
    payload = " ".join(f"0x{byte:02x}" for byte in frame.payload)
    return (
        f"preambule: 0x{frame.preamble:04x}, fromByte: 0x{frame.from_byte:02x}, "
        f"commandID: 0x{frame.command_id:02x}, payloadSz: 0x{frame.payload_size:02x}\n"
        f"{payload}\n"
        f"postambule: 0x{frame.postamble:04x}"
    )


def parse_buffer(buffer: bytes) -> Frame:
    """Decode and check a raw buffer; raise FrameError if it is malformed."""
    frame = Frame.from_bytes(buffer)
    code = check_frame(frame)
    if code is not None:
        logger.error(
            "[Main_thread] : checkFrame returned error code %d (%s)", code, code_to_string(code)
        )
        logger.debug("%s", format_frame(frame))
        raise FrameError(code, frame)
    return frame