"""
Module providing the primitive DNS wire-format encoders.

All integers are written big-endian and names are written out in full, label by
label, without RFC 1035 compression pointers.
"""

import ipaddress
import struct

MAXIMUM_LABEL_LENGTH = 63
MAXIMUM_CHARACTER_STRING_LENGTH = 255


def encode_name(name: str) -> bytes:
    """
    Encodes a dot separated domain name into a sequence of length prefixed labels,
    terminated by the zero length root label.

    Empty labels are skipped, so a trailing dot is optional.

    >>> encode_name("a.b.local")
    b'\\x01a\\x01b\\x05local\\x00'

    :param name: The domain name to encode.
    :return: The wire-format name.
    :raises ValueError: If any label is longer than 63 bytes.
    """
    encoded = bytearray()
    for label in name.split("."):
        if not label:
            continue
        label_bytes = label.encode("utf-8")
        if len(label_bytes) > MAXIMUM_LABEL_LENGTH:
            raise ValueError(
                f"Label {label!r} of {name!r} exceeds the maximum label length of "
                f"{MAXIMUM_LABEL_LENGTH} bytes."
            )
        encoded.append(len(label_bytes))
        encoded += label_bytes
    encoded.append(0)
    return bytes(encoded)


def encode_uint16(value: int) -> bytes:
    return _pack(">H", value)


def encode_uint32(value: int) -> bytes:
    return _pack(">I", value)


def encode_character_string(text: str) -> bytes:
    """
    Encodes a string as a DNS character-string: a single length byte followed by
    the UTF-8 bytes of the string.

    :raises ValueError: If the encoded string is longer than 255 bytes.
    """
    text_bytes = text.encode("utf-8")
    if len(text_bytes) > MAXIMUM_CHARACTER_STRING_LENGTH:
        raise ValueError(
            f"String {text!r} exceeds the maximum character-string length of "
            f"{MAXIMUM_CHARACTER_STRING_LENGTH} bytes."
        )
    return bytes([len(text_bytes)]) + text_bytes


def encode_ipv4(address: str) -> bytes:
    """
    Encodes a dotted-quad IPv4 address into its four octets.

    :raises ValueError: If the address does not consist of exactly four decimal
        octets in the range 0-255.
    """
    if not isinstance(address, str):
        raise ValueError(f"Given address {address!r} is not a valid IPv4 address.")
    try:
        return ipaddress.IPv4Address(address).packed
    except ValueError:
        raise ValueError(f"Given address {address!r} is not a valid IPv4 address.")


def _pack(fmt: str, value: int) -> bytes:
    try:
        return struct.pack(fmt, value)
    except struct.error as e:
        raise ValueError(f"Cannot encode {value!r} as {fmt}: {e}") from e
