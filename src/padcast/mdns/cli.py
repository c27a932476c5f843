"""
Command line interface for padcast.mdns.
"""

import argparse
import logging
import textwrap
import threading
from contextlib import contextmanager
from signal import signal, SIGINT

from rich.logging import RichHandler

from padcast.mdns.advertiser import MdnsAdvertiser
from padcast.mdns.channel import DEFAULT_SERVICE_PORT
from padcast.mdns.network import get_local_ip
from padcast.mdns.records import (
    DEFAULT_DEVICE_NAME,
    ServiceDescriptor,
    instance_name,
)
from padcast.mdns.scheduler import ANNOUNCE_INTERVAL


def handle_user_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments from the command line.

    :return: The namespace of arguments read from the command line.
    """
    description = textwrap.dedent(
        """\
    Advertise an AirPlay receiver on the local network with mDNS announcements.
    """
    )
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument(
        "-n",
        "--name",
        default=DEFAULT_DEVICE_NAME,
        help="Device name to advertise the receiver as.",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DEFAULT_SERVICE_PORT,
        help="Port the receiver is listening on.",
    )
    parser.add_argument(
        "-t",
        "--txt",
        dest="txt_entries",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="TXT record entry, may be given several times.",
    )
    parser.add_argument(
        "-a",
        "--ip",
        dest="address",
        default=None,
        help="IPv4 address to advertise. Defaults to this host's local address.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=ANNOUNCE_INTERVAL,
        help="Seconds between announcements.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False)

    arguments = parser.parse_args(args)
    return arguments


def parse_txt_entries(entries) -> dict[str, str]:
    txt_records = {}
    for entry in entries:
        key, separator, value = entry.partition("=")
        if not separator or not key:
            raise ValueError(f'TXT entry "{entry}" is not of the form KEY=VALUE.')
        txt_records[key] = value
    return txt_records


def descriptor_from_arguments(arguments: argparse.Namespace) -> ServiceDescriptor:
    address = arguments.address
    if address is None:
        address = get_local_ip()
    return ServiceDescriptor(
        service_name=instance_name(arguments.name),
        port=arguments.port,
        txt_records=parse_txt_entries(arguments.txt_entries),
        host_address=address,
    )


@contextmanager
def ctrl_c_cancellation():
    """
    Routes Ctrl-C to a :class:`CancellationToken` while the advertiser runs, so the
    command can stop advertising cleanly instead of unwinding with a traceback.
    """
    token = CancellationToken()

    prev_handler = signal(SIGINT, lambda _, __: token.cancel())
    try:
        yield token
    finally:
        signal(SIGINT, prev_handler)


class CancellationToken:
    """
    Set once the user asks the advertiser to shut down.
    """

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def is_cancelled(self):
        return self._cancelled.is_set()

    def cancel(self):
        self._cancelled.set()

    def wait_cancellation(self, interval=0.1):
        """
        Blocks until shutdown is requested.

        :param interval: Timeout of each wait, so signal handlers get to run in between.
        """
        while not self._cancelled.wait(interval):
            pass


def main(args=None):
    """
    Entry point for the command line.
    """
    arguments = handle_user_arguments(args)

    logging.basicConfig(
        level=logging.DEBUG if arguments.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logging.captureWarnings(True)

    try:
        descriptor = descriptor_from_arguments(arguments)
    except ValueError as e:
        logging.error(f"Invalid service description: {e}")
        return 2

    with ctrl_c_cancellation() as cancellation:
        with MdnsAdvertiser(interval=arguments.interval) as advertiser:
            result = advertiser.start_advertising(descriptor)
            if not result:
                logging.error(result.message)
                return 1
            print(
                f"Advertising {descriptor.service_name} at "
                f"{descriptor.host_address}:{descriptor.port}"
            )
            cancellation.wait_cancellation()
            print("Stopping mDNS advertising.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
