"""
Module providing the DNS message builder used for unsolicited mDNS responses.
"""

from dataclasses import dataclass
from typing import Iterable

from .encoding import encode_name, encode_uint16, encode_uint32

TYPE_A = 1
TYPE_PTR = 12
TYPE_TXT = 16
TYPE_SRV = 33

CLASS_IN = 0x0001
CACHE_FLUSH_BIT = 0x8000
CLASS_IN_FLUSH = CLASS_IN | CACHE_FLUSH_BIT

DEFAULT_RECORD_TTL = 120

# QR (response) and AA (authoritative answer)
RESPONSE_FLAGS = 0x8400
HEADER_LENGTH = 12
MAXIMUM_RDATA_LENGTH = 0xFFFF


@dataclass(frozen=True, kw_only=True)
class ResourceRecord:
    name: str
    type: int
    rdata: bytes
    rrclass: int = CLASS_IN_FLUSH
    ttl: int = DEFAULT_RECORD_TTL

    def to_bytes(self) -> bytes:
        """
        Serialises this record as an answer section entry.

        :raises ValueError: If the record data does not fit in a 16 bit length field.
        """
        if len(self.rdata) > MAXIMUM_RDATA_LENGTH:
            raise ValueError(
                f"Record data for {self.name} is {len(self.rdata)} bytes, which exceeds "
                f"the maximum of {MAXIMUM_RDATA_LENGTH} bytes."
            )
        return b"".join(
            (
                encode_name(self.name),
                encode_uint16(self.type),
                encode_uint16(self.rrclass),
                encode_uint32(self.ttl),
                encode_uint16(len(self.rdata)),
                self.rdata,
            )
        )


def build_header(answer_count: int) -> bytes:
    return b"".join(
        (
            encode_uint16(0),  # ID
            encode_uint16(RESPONSE_FLAGS),
            encode_uint16(0),  # QDCOUNT
            encode_uint16(answer_count),
            encode_uint16(0),  # NSCOUNT
            encode_uint16(0),  # ARCOUNT
        )
    )


def build_message(records: Iterable[ResourceRecord]) -> bytes:
    """
    Builds a complete DNS response message with the given records placed in the
    answer section, in order.

    The header is derived entirely from the records: the transaction ID is zero,
    the flags mark an authoritative response and only the answer count is non-zero.

    :param records: Records to place in the answer section.
    :return: The wire-format message.
    """
    answers = [record.to_bytes() for record in records]
    return build_header(len(answers)) + b"".join(answers)
