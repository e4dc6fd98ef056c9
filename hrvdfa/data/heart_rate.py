from __future__ import annotations

import struct
from typing import List, Optional

from ..core.monitor import Measurement


# Bluetooth SIG assigned numbers for the Heart Rate profile
SERVICE_HEART_RATE = 0x180D
CHAR_HEART_RATE_MEASUREMENT = 0x2A37

FLAG_HR_UINT16 = 0x01
FLAG_ENERGY_EXPENDED = 0x08
FLAG_RR_PRESENT = 0x10

RR_UNITS_PER_SECOND = 1024.0


class MalformedPacketError(ValueError):
    pass


def decode_heart_rate_measurement(data: bytes, timestamp: Optional[int] = None) -> Measurement:
    """Decode a Heart Rate Measurement notification (characteristic 0x2A37).

    Layout: flags byte, heart rate (uint8, or uint16 LE when bit 0 is set),
    optional uint16 energy expended (bit 3), then uint16 LE RR intervals in
    1/1024 s while bit 4 is set. RR values are returned in milliseconds.
    """
    buf = bytes(data)
    if len(buf) < 2:
        raise MalformedPacketError(f"packet too short: {len(buf)} bytes")
    flags = buf[0]
    offset = 1

    if flags & FLAG_HR_UINT16:
        if len(buf) < offset + 2:
            raise MalformedPacketError("truncated uint16 heart rate")
        (heart_rate,) = struct.unpack_from("<H", buf, offset)
        offset += 2
    else:
        heart_rate = buf[offset]
        offset += 1

    if flags & FLAG_ENERGY_EXPENDED:
        if len(buf) < offset + 2:
            raise MalformedPacketError("truncated energy expended field")
        offset += 2

    rr_ms: List[float] = []
    if flags & FLAG_RR_PRESENT:
        remaining = len(buf) - offset
        if remaining % 2:
            raise MalformedPacketError("odd number of bytes in RR interval field")
        for (raw,) in struct.iter_unpack("<H", buf[offset:]):
            rr_ms.append(raw / RR_UNITS_PER_SECOND * 1000.0)

    return Measurement(heart_rate=int(heart_rate), rr_intervals=rr_ms, timestamp=timestamp)


def encode_heart_rate_measurement(heart_rate: int, rr_ms: List[float]) -> bytes:
    """Build a 0x2A37 payload, e.g. to simulate a sensor."""
    flags = FLAG_RR_PRESENT if rr_ms else 0
    if heart_rate > 0xFF:
        flags |= FLAG_HR_UINT16
        head = struct.pack("<BH", flags, heart_rate)
    else:
        head = struct.pack("<BB", flags, heart_rate)
    body = b"".join(struct.pack("<H", int(round(rr / 1000.0 * RR_UNITS_PER_SECOND))) for rr in rr_ms)
    return head + body
