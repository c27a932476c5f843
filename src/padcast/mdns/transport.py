"""
Module providing the send-only multicast UDP transport for mDNS packets.
"""

import logging
import socket as _socket
from socket import (
    socket,
    AF_INET,
    SOCK_DGRAM,
    IPPROTO_IP,
    IP_MULTICAST_LOOP,
    IP_MULTICAST_TTL,
    SOL_SOCKET,
    SO_REUSEADDR,
)
from typing import Optional

MDNS_ADDRESS = "224.0.0.251"
MDNS_PORT = 5353
MULTICAST_TTL = 255


def _connect_socket(ttl: int) -> socket:
    # IPv4 UDP socket
    s = socket(AF_INET, SOCK_DGRAM)
    try:
        # Enable reuse, so other mDNS responders on this host can share the port
        s.setsockopt(SOL_SOCKET, SO_REUSEADDR, 1)
        # not available on every platform
        if hasattr(_socket, "SO_REUSEPORT"):
            s.setsockopt(SOL_SOCKET, _socket.SO_REUSEPORT, 1)
        s.setsockopt(IPPROTO_IP, IP_MULTICAST_TTL, ttl)
        s.setsockopt(IPPROTO_IP, IP_MULTICAST_LOOP, 1)
    except OSError:
        s.close()
        raise
    return s


class MulticastTransport:
    """
    Sends datagrams to the mDNS multicast group.

    Sending is best effort: failures are logged and reported through the return
    value of :meth:`send`, and never raised.
    """

    def __init__(
        self,
        address: Optional[str] = None,
        port: Optional[int] = None,
        ttl: Optional[int] = None,
    ):
        if address is None:
            address = MDNS_ADDRESS
        if port is None:
            port = MDNS_PORT
        if ttl is None:
            ttl = MULTICAST_TTL
        self.logger = logging.getLogger(__name__)
        self.address = address
        self.port = port
        self.ttl = ttl
        self._socket: Optional[socket] = None

    @property
    def is_open(self):
        return self._socket is not None

    def open(self):
        """
        Creates the underlying socket.

        :raises RuntimeError: If the transport is already open.
        :raises OSError: If the socket could not be created or configured. No
            socket is left open in this case.
        """
        if self._socket is not None:
            raise RuntimeError("Multicast transport already open!")
        self._socket = _connect_socket(self.ttl)
        self.logger.debug(
            f"mDNS transport open, sending to {self.address}:{self.port} (ttl {self.ttl})"
        )

    def send(self, data: bytes) -> bool:
        """
        Sends a single datagram to the multicast group.

        :param data: The packet to send.
        :return: `True` if the packet was handed to the network, `False` if the
            transport is closed or the send failed.
        """
        s = self._socket
        if s is None:
            self.logger.debug("mDNS transport is not open, dropping packet.")
            return False
        try:
            s.sendto(data, (self.address, self.port))
        except OSError as e:
            self.logger.warning(f"Failed to send mDNS packet: {e}")
            return False
        return True

    def close(self):
        if self._socket is not None:
            s, self._socket = self._socket, None
            s.close()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
