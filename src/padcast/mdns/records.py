"""
Module providing the resource records that advertise a single AirPlay service
instance over DNS-SD.

An announcement consists of four records, always in the same order:

.. code::

    _airplay._tcp.local           PTR  OPPO-Pad._airplay._tcp.local
    OPPO-Pad._airplay._tcp.local  SRV  0 0 7000 OPPO-Pad.local
    OPPO-Pad._airplay._tcp.local  TXT  "deviceid=11:22:33:44:55:66"
    OPPO-Pad.local                A    192.168.1.50

"""

from dataclasses import dataclass, field

from .encoding import (
    MAXIMUM_LABEL_LENGTH,
    encode_character_string,
    encode_ipv4,
    encode_name,
    encode_uint16,
)
from .message import TYPE_A, TYPE_PTR, TYPE_SRV, TYPE_TXT, ResourceRecord

AIRPLAY_SERVICE_TYPE = "_airplay._tcp.local"
DEFAULT_DEVICE_NAME = "OPPO-Pad"
LOCAL_DOMAIN = "local"


@dataclass(frozen=True, kw_only=True)
class ServiceDescriptor:
    """
    Description of the service instance being advertised.

    The descriptor is fixed for the duration of an advertising session. Invalid
    fields are rejected on construction, rather than producing corrupted records
    later on.

    >>> descriptor = ServiceDescriptor(
    ...     service_name="OPPO-Pad.local", port=7000, host_address="192.168.1.50"
    ... )
    >>> descriptor.device_name
    'OPPO-Pad'
    >>> descriptor.host_name
    'OPPO-Pad.local'
    """

    service_name: str
    port: int
    host_address: str
    txt_records: dict[str, str] = field(default_factory=dict)
    service_type: str = AIRPLAY_SERVICE_TYPE

    def __post_init__(self):
        # own copy, so the caller's mapping can change without affecting the session
        if isinstance(self.txt_records, dict):
            object.__setattr__(self, "txt_records", dict(self.txt_records))
        validate_descriptor(self)

    @property
    def device_name(self) -> str:
        """
        The first label of the service name, used to derive the host name.
        """
        return self.service_name.split(".", 1)[0] or DEFAULT_DEVICE_NAME

    @property
    def host_name(self) -> str:
        return f"{self.device_name}.{LOCAL_DOMAIN}"

    @property
    def txt_strings(self) -> list[str]:
        return [f"{key}={value}" for key, value in self.txt_records.items()]


def validate_descriptor(descriptor: ServiceDescriptor):
    """
    Checks that every field of the descriptor can be represented on the wire.

    :raises ValueError: If any field is missing or out of range.
    """
    if not descriptor.service_name or not isinstance(descriptor.service_name, str):
        raise ValueError("Service descriptor does not contain a service name.")
    if not isinstance(descriptor.host_address, str):
        raise ValueError(f"Host address {descriptor.host_address!r} is not a string.")
    if not isinstance(descriptor.txt_records, dict):
        raise ValueError(f"TXT records {descriptor.txt_records!r} are not a mapping.")
    if not isinstance(descriptor.port, int) or not 0 <= descriptor.port <= 0xFFFF:
        raise ValueError(f"Port {descriptor.port} is not a valid port number.")
    # encoding doubles as validation of label and string lengths
    encode_name(descriptor.service_name)
    encode_name(descriptor.service_type)
    encode_name(descriptor.host_name)
    for txt_string in descriptor.txt_strings:
        encode_character_string(txt_string)
    encode_ipv4(descriptor.host_address)


def ptr_record(service_type: str, service_name: str) -> ResourceRecord:
    return ResourceRecord(
        name=service_type, type=TYPE_PTR, rdata=encode_name(service_name)
    )


def srv_record(
    service_name: str,
    target_host: str,
    port: int,
    *,
    priority: int = 0,
    weight: int = 0,
) -> ResourceRecord:
    rdata = b"".join(
        (
            encode_uint16(priority),
            encode_uint16(weight),
            encode_uint16(port),
            encode_name(target_host),
        )
    )
    return ResourceRecord(name=service_name, type=TYPE_SRV, rdata=rdata)


def txt_record(service_name: str, txt_records: dict[str, str]) -> ResourceRecord:
    """
    Creates a TXT record holding one ``key=value`` character-string per entry of
    the given mapping, in iteration order.
    """
    rdata = b"".join(
        encode_character_string(f"{key}={value}") for key, value in txt_records.items()
    )
    return ResourceRecord(name=service_name, type=TYPE_TXT, rdata=rdata)


def a_record(host_name: str, address: str) -> ResourceRecord:
    return ResourceRecord(name=host_name, type=TYPE_A, rdata=encode_ipv4(address))


def build_announcement(descriptor: ServiceDescriptor) -> list[ResourceRecord]:
    """
    Creates the records that advertise the given service instance.

    :param descriptor: The service instance to advertise.
    :return: The PTR, SRV, TXT and A records for the instance, in that order.
    """
    host_name = descriptor.host_name
    return [
        ptr_record(descriptor.service_type, descriptor.service_name),
        srv_record(descriptor.service_name, host_name, descriptor.port),
        txt_record(descriptor.service_name, descriptor.txt_records),
        a_record(host_name, descriptor.host_address),
    ]


def instance_name(device_name: str, service_type: str = AIRPLAY_SERVICE_TYPE) -> str:
    """
    Qualifies a device name with the service type, e.g. ``OPPO-Pad`` becomes
    ``OPPO-Pad._airplay._tcp.local``.
    """
    if len(device_name.encode("utf-8")) > MAXIMUM_LABEL_LENGTH:
        raise ValueError(f"Device name {device_name!r} is too long for a DNS label.")
    return f"{device_name}.{service_type}"
