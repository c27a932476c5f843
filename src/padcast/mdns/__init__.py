"""
Module providing service advertisement for the AirPlay receiver over multicast DNS.

The receiver is announced with unsolicited mDNS responses, sent to the mDNS
group ``224.0.0.251:5353`` every 30 seconds while advertising. Each announcement
is a single DNS response packet holding four answers:

.. code::

    _airplay._tcp.local           PTR  <instance>._airplay._tcp.local
    <instance>._airplay._tcp.local SRV 0 0 <port> <device>.local
    <instance>._airplay._tcp.local TXT "key=value" ...
    <device>.local                A    <ipv4 address>

The :class:`MdnsAdvertiser` class manages the announcements, and the
:class:`MethodChannel` class exposes it to a host application through named
method calls.
"""

from padcast.mdns.advertiser import MdnsAdvertiser, AdvertiserState, Result
from padcast.mdns.channel import MethodChannel
from padcast.mdns.records import ServiceDescriptor, build_announcement
from padcast.mdns.message import ResourceRecord, build_message

__version__ = "1.0.0"
