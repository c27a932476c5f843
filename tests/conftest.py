import socket
import time

import pytest

from padcast.mdns.records import ServiceDescriptor

LOOPBACK = "127.0.0.1"
RECEIVE_TIMEOUT = 2.0


@pytest.fixture
def descriptor():
    return ServiceDescriptor(
        service_name="OPPO-Pad.local",
        port=7000,
        txt_records={"deviceid": "11:22:33:44:55:66"},
        host_address="192.168.1.50",
    )


@pytest.fixture
def airplay_descriptor():
    return ServiceDescriptor(
        service_name="OPPO-Pad._airplay._tcp.local",
        port=7000,
        txt_records={"deviceid": "AA:BB", "features": "0x5", "model": "AppleTV3,2"},
        host_address="10.0.0.7",
    )


@pytest.fixture
def receiver():
    """
    A UDP socket on a free loopback port, standing in for the multicast group.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    s.bind((LOOPBACK, 0))
    s.settimeout(RECEIVE_TIMEOUT)
    yield s
    s.close()


def receive_packets(s: socket.socket, timeout: float):
    """
    Collects all the packets that arrive on the socket within the timeout.
    """
    packets = []
    deadline = time.monotonic() + timeout
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        s.settimeout(remaining)
        try:
            packet, _ = s.recvfrom(65535)
        except socket.timeout:
            break
        packets.append(packet)
    s.settimeout(RECEIVE_TIMEOUT)
    return packets
