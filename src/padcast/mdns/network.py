"""
Helpers for finding the IPv4 address to advertise for this host.
"""

import ipaddress
import socket

import psutil
from psutil._common import snicaddr

LOOPBACK_ADDRESS = "127.0.0.1"


def get_ipv4_addresses() -> list[snicaddr]:
    """
    Gets all the IPV4 addresses currently available on all interfaces that are up.

    :return: A list of address entries, as returned by :func:`psutil.net_if_addrs`.
    """
    active_ifs = {name for name, stats in psutil.net_if_stats().items() if stats.isup}
    return [
        addr
        for name, addrs in psutil.net_if_addrs().items()
        if name in active_ifs
        for addr in addrs
        if addr.family == socket.AddressFamily.AF_INET
    ]


def get_default_ip() -> str:
    """
    Asks the routing table which local address would reach the wider network.
    Connecting a UDP socket sends nothing. Falls back to the loopback address
    when there is no route.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("10.255.255.255", 1))
        ip = s.getsockname()[0]
    except OSError:
        ip = LOOPBACK_ADDRESS
    finally:
        s.close()
    return ip


def get_local_ip() -> str:
    """
    Picks the address to advertise: the first non-loopback IPv4 address on an
    active interface, falling back to the default route's address.
    """
    for entry in get_ipv4_addresses():
        if not ipaddress.ip_address(entry.address).is_loopback:
            return entry.address
    return get_default_ip()
