import struct
from typing import NamedTuple

import numpy as np


# 4 reserved bytes, then width, height, logical width, logical height
FOOTER = struct.Struct('<4s4H')
UINT16_MAX = 0xFFFF


class MalformedInput(ValueError):
    pass


class InvalidDimensions(ValueError):
    pass


class Footer(NamedTuple):
    reserved: bytes
    width: int
    height: int
    logical_width: int
    logical_height: int


def read_footer(data: bytes) -> Footer:
    if len(data) < FOOTER.size:
        raise MalformedInput(f'Expected at least {FOOTER.size} bytes, got {len(data)}')
    return Footer(*FOOTER.unpack(data[-FOOTER.size:]))


def write_footer(width, height, logical_width, logical_height, reserved=bytes(4)):
    dims = (width, height, logical_width, logical_height)
    if not all(0 <= dim <= UINT16_MAX for dim in dims):
        raise InvalidDimensions(f'Dimensions do not fit the footer: {dims}')
    assert len(reserved) == 4, reserved
    return FOOTER.pack(reserved, *dims)


def decode_pixels(data: bytes) -> np.ndarray:
    """Decode the pixel body into packed 0x00RRGGBB colors.

    The capture stores its BGR triples back to front, so the first color
    emitted is built from the last three bytes of the body.
    """
    if len(data) < 3 or len(data) % 3:
        raise MalformedInput(f'Pixel data length {len(data)} is not a positive multiple of 3')
    bgr = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3)[::-1].astype(np.uint32)
    return bgr[:, 2] << 16 | bgr[:, 1] << 8 | bgr[:, 0]


def encode_pixels(colors) -> bytes:
    colors = np.asarray(colors, dtype=np.uint32)[::-1]
    bgr = np.stack([colors & 0xFF, (colors >> 8) & 0xFF, (colors >> 16) & 0xFF], axis=-1)
    return bgr.astype(np.uint8).tobytes()


def read_frame(data: bytes):
    footer = read_footer(data)
    return footer, decode_pixels(data[:-FOOTER.size])
