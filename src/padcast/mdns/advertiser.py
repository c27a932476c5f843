"""
Module providing the mDNS advertiser, which periodically announces a service
instance on the local network with unsolicited mDNS responses.

No probing is done and incoming queries are never answered: peers rely on the
periodic announcements alone.
"""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .message import build_message
from .records import ServiceDescriptor, build_announcement
from .scheduler import AnnouncementScheduler
from .transport import MulticastTransport

START_ERROR = "START_ERROR"
STOP_ERROR = "STOP_ERROR"
SEND_ERROR = "SEND_ERROR"
NOT_ADVERTISING = "NOT_ADVERTISING"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class AdvertiserState(enum.Enum):
    IDLE = "idle"
    ADVERTISING = "advertising"


@dataclass(frozen=True, kw_only=True)
class Result:
    """
    Outcome of an advertiser operation. Truthy if the operation succeeded.
    """

    ok: bool
    code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def success(cls):
        return cls(ok=True)

    @classmethod
    def error(cls, code: str, message: Optional[str] = None):
        return cls(ok=False, code=code, message=message)

    def __bool__(self):
        return self.ok


class MdnsAdvertiser:
    """
    Advertises a single service instance over mDNS.

    While advertising, the advertiser owns one multicast transport and one
    announcement scheduler; neither exists while idle. Public operations report
    failures as :class:`Result` values rather than raising.

    .. code::

        with MdnsAdvertiser() as advertiser:
            advertiser.start_advertising(descriptor)
            cancellation.wait_cancellation()
    """

    def __init__(
        self,
        *,
        address: Optional[str] = None,
        port: Optional[int] = None,
        interval: Optional[float] = None,
        ttl: Optional[int] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.address = address
        self.port = port
        self.interval = interval
        self.ttl = ttl

        # held for the whole of a start or stop, so they cannot interleave
        self._lifecycle_lock = threading.RLock()
        # held only briefly, the announcing thread takes it to read the session
        self._state_lock = threading.Lock()

        self._state = AdvertiserState.IDLE
        self._descriptor: Optional[ServiceDescriptor] = None
        self._transport: Optional[MulticastTransport] = None
        self._scheduler: Optional[AnnouncementScheduler] = None

    @property
    def state(self) -> AdvertiserState:
        return self._state

    @property
    def advertising(self) -> bool:
        return self._state is AdvertiserState.ADVERTISING

    @property
    def descriptor(self) -> Optional[ServiceDescriptor]:
        """
        The service currently being advertised, or `None` if idle.
        """
        return self._descriptor

    def start_advertising(self, descriptor: ServiceDescriptor) -> Result:
        """
        Starts advertising the given service, sending the first announcement
        immediately and then repeating it periodically.

        If already advertising, this succeeds without doing anything, and the
        given descriptor is ignored: the service cannot be changed without
        stopping first.

        :param descriptor: The service to advertise.
        :return: A successful result, or a ``START_ERROR`` if the transport could
            not be created.
        """
        if descriptor is None:
            return Result.error(INVALID_ARGUMENT, "Service descriptor is missing.")

        with self._lifecycle_lock:
            if self.advertising:
                if descriptor != self._descriptor:
                    self.logger.debug(
                        f"Already advertising {self._descriptor.service_name}, "
                        f"ignoring {descriptor.service_name}."
                    )
                return Result.success()

            transport = MulticastTransport(self.address, self.port, self.ttl)
            try:
                transport.open()
            except OSError as e:
                self.logger.error(f"Failed to start mDNS advertising: {e}")
                return Result.error(START_ERROR, f"Failed to start: {e}")

            scheduler = AnnouncementScheduler(self.announce, self.interval)
            with self._state_lock:
                self._descriptor = descriptor
                self._transport = transport
                self._scheduler = scheduler
                self._state = AdvertiserState.ADVERTISING

            try:
                scheduler.start()
            except RuntimeError as e:
                self.logger.error(f"Failed to start mDNS announcements: {e}")
                self._teardown()
                return Result.error(START_ERROR, f"Failed to start: {e}")

        self.logger.info(f"mDNS advertising started for {descriptor.service_name}")
        return Result.success()

    def stop_advertising(self) -> Result:
        """
        Stops advertising and releases the transport and scheduler. Stopping while
        idle succeeds and does nothing.

        :return: A successful result, or a ``STOP_ERROR`` if the transport failed
            to close. The advertiser is idle afterwards in either case.
        """
        with self._lifecycle_lock:
            if not self.advertising:
                return Result.success()
            try:
                self._teardown()
            except OSError as e:
                self.logger.error(f"Failed to stop mDNS advertising: {e}")
                return Result.error(STOP_ERROR, f"Failed to stop: {e}")

        self.logger.info("mDNS advertising stopped")
        return Result.success()

    def send_record(self, data: bytes) -> Result:
        """
        Sends an already encoded packet verbatim, bypassing the announcement
        records. Advertising must have been started first.

        :param data: The raw packet to send.
        :return: A successful result, ``NOT_ADVERTISING`` if the advertiser is
            idle, or ``SEND_ERROR`` if the packet could not be sent.
        """
        # bytes(n) would allocate n zero bytes rather than reject the integer
        if isinstance(data, (int, str)):
            return Result.error(INVALID_ARGUMENT, f"Data is not a byte sequence: {data!r}")
        try:
            packet = bytes(data)
        except (TypeError, ValueError, OverflowError, MemoryError) as e:
            return Result.error(INVALID_ARGUMENT, f"Data is not a byte sequence: {e}")

        with self._state_lock:
            transport = self._transport

        if transport is None:
            return Result.error(
                NOT_ADVERTISING, "Not advertising, call start_advertising first."
            )
        if not transport.send(packet):
            return Result.error(SEND_ERROR, "Failed to send mDNS record.")
        return Result.success()

    def announce(self) -> bool:
        """
        Sends one announcement of the current service, as a single packet holding
        its PTR, SRV, TXT and A records.

        :return: `True` if the announcement was sent, `False` if idle or the send
            failed.
        """
        with self._state_lock:
            descriptor = self._descriptor
            transport = self._transport

        if descriptor is None or transport is None:
            return False

        packet = build_message(build_announcement(descriptor))
        sent = transport.send(packet)
        if sent:
            self.logger.debug(f"mDNS records sent for {descriptor.service_name}")
        return sent

    def close(self):
        """
        Stops advertising, if needed.
        """
        self.stop_advertising()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _teardown(self):
        with self._state_lock:
            scheduler, transport = self._scheduler, self._transport
            self._descriptor = None
            self._transport = None
            self._scheduler = None
            self._state = AdvertiserState.IDLE

        # outside the state lock, an announcement in flight may still need it
        if scheduler is not None:
            scheduler.stop()
        if transport is not None:
            transport.close()
