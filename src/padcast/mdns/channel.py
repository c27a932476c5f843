"""
Module providing the method channel through which a host application drives
the advertiser, by invoking named methods with dictionaries of arguments.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .advertiser import (
    INVALID_ARGUMENT,
    NOT_IMPLEMENTED,
    MdnsAdvertiser,
    Result,
)
from .records import ServiceDescriptor

CHANNEL_NAME = "com.airplay.padcast.receiver/mdns"

START_ADVERTISING = "startAdvertising"
STOP_ADVERTISING = "stopAdvertising"
SEND_RECORD = "sendRecord"

DEFAULT_SERVICE_PORT = 7000

MethodHandler = Callable[..., Result]


@dataclass(kw_only=True)
class MethodRegistration:
    name: str
    arguments: dict
    handler: MethodHandler

    def bind(self, arguments: dict) -> inspect.BoundArguments:
        """
        Merges the given arguments over the defaults and binds them to the handler.

        :raises TypeError: If the arguments do not match the handler's signature.
        """
        args = {}
        args.update(self.arguments)
        args.update(arguments)
        return inspect.signature(self.handler).bind(**args)


class MethodChannel:
    """
    Dispatches host method calls to an :class:`MdnsAdvertiser`.

    The channel exposes ``startAdvertising``, ``stopAdvertising`` and
    ``sendRecord``, taking the same argument names and defaults as the host
    application uses.
    """

    def __init__(self, advertiser: MdnsAdvertiser | None = None):
        self.name = CHANNEL_NAME
        self.logger = logging.getLogger(__name__)
        self.advertiser = advertiser or MdnsAdvertiser()
        self._methods: dict[str, MethodRegistration] = {}

        self.register_method(
            START_ADVERTISING,
            self._start_advertising,
            {
                "serviceName": "",
                "port": DEFAULT_SERVICE_PORT,
                "txtRecords": {},
                "localIP": "",
            },
        )
        self.register_method(STOP_ADVERTISING, self._stop_advertising)
        self.register_method(SEND_RECORD, self._send_record, {"data": None})

    @property
    def methods(self) -> dict[str, MethodRegistration]:
        """
        Gets a copy of the methods that have been registered, including their names,
        default arguments and handler.
        """
        return dict(self._methods)

    def register_method(
        self,
        name: str,
        handler: MethodHandler,
        default_arguments: dict | None = None,
    ):
        """
        Registers a method on this channel, replacing any method of the same name.

        :param name: Name the host invokes the method by.
        :param handler: Callback run with the merged arguments, returning a :class:`Result`.
        :param default_arguments: The arguments of the handler and their default values.
        """
        if default_arguments is None:
            default_arguments = {}
        self._methods[name] = MethodRegistration(
            name=name, arguments=default_arguments, handler=handler
        )

    def unregister_method(self, name: str):
        try:
            del self._methods[name]
        except KeyError:
            raise KeyError(f"Method {name} does not exist")

    def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> Result:
        """
        Runs the named method with the given arguments, filling in defaults for any
        argument not given.

        :return: The result of the method, or ``NOT_IMPLEMENTED`` for an unknown
            method.
        """
        try:
            method = self._methods[name]
        except KeyError:
            return Result.error(NOT_IMPLEMENTED, f"Unknown method: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return Result.error(
                INVALID_ARGUMENT, f"Arguments for {name} are not a mapping: {arguments!r}"
            )
        try:
            bound = method.bind(arguments)
        except TypeError as e:
            return Result.error(INVALID_ARGUMENT, f"Invalid arguments for {name}: {e}")
        return method.handler(*bound.args, **bound.kwargs)

    def close(self):
        """
        Stops any advertising, for when the host detaches from the channel.
        """
        self.advertiser.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _start_advertising(
        self,
        serviceName: str,
        port: int,
        txtRecords: dict[str, str],
        localIP: str,
    ) -> Result:
        # an explicit null from the host means the default, as an omitted argument does
        if serviceName is None:
            serviceName = ""
        if port is None:
            port = DEFAULT_SERVICE_PORT
        if localIP is None:
            localIP = ""
        try:
            descriptor = ServiceDescriptor(
                service_name=serviceName,
                port=port,
                txt_records=dict(txtRecords or {}),
                host_address=localIP,
            )
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Rejected {START_ADVERTISING} call: {e}")
            return Result.error(INVALID_ARGUMENT, str(e))
        return self.advertiser.start_advertising(descriptor)

    def _stop_advertising(self) -> Result:
        return self.advertiser.stop_advertising()

    def _send_record(self, data: bytes | None) -> Result:
        if data is None:
            return Result.error(INVALID_ARGUMENT, "Data is null")
        return self.advertiser.send_record(data)
