import pytest

from padcast.mdns.message import TYPE_A, TYPE_PTR, TYPE_SRV, TYPE_TXT
from padcast.mdns.records import (
    AIRPLAY_SERVICE_TYPE,
    DEFAULT_DEVICE_NAME,
    ServiceDescriptor,
    a_record,
    build_announcement,
    instance_name,
    ptr_record,
    srv_record,
    txt_record,
)


def make_descriptor(**overrides):
    properties = dict(
        service_name="OPPO-Pad.local",
        port=7000,
        txt_records={},
        host_address="192.168.1.50",
    )
    properties.update(overrides)
    return ServiceDescriptor(**properties)


def test_announcement_order(descriptor):
    records = build_announcement(descriptor)
    assert [record.type for record in records] == [TYPE_PTR, TYPE_SRV, TYPE_TXT, TYPE_A]


def test_announcement_names(airplay_descriptor):
    ptr, srv, txt, a = build_announcement(airplay_descriptor)
    assert ptr.name == AIRPLAY_SERVICE_TYPE
    assert srv.name == "OPPO-Pad._airplay._tcp.local"
    assert txt.name == "OPPO-Pad._airplay._tcp.local"
    assert a.name == "OPPO-Pad.local"


def test_announcement_scenario(descriptor):
    ptr, srv, txt, a = build_announcement(descriptor)
    assert ptr.rdata == b"\x08OPPO-Pad\x05local\x00"
    assert srv.rdata == bytes.fromhex("0000 0000 1B58") + b"\x08OPPO-Pad\x05local\x00"
    assert txt.rdata == b"\x1adeviceid=11:22:33:44:55:66"
    assert a.name == "OPPO-Pad.local"
    assert a.rdata == bytes.fromhex("C0 A8 01 32")


def test_txt_record_order():
    record = txt_record("x.local", {"deviceid": "AA:BB", "features": "0x5"})
    assert record.rdata[0] == len("deviceid=AA:BB") == 0x0E
    assert record.rdata == b"\x0edeviceid=AA:BB\x0cfeatures=0x5"


def test_txt_record_order_reversed():
    record = txt_record("x.local", {"features": "0x5", "deviceid": "AA:BB"})
    assert record.rdata == b"\x0cfeatures=0x5\x0edeviceid=AA:BB"


def test_txt_record_empty():
    assert txt_record("x.local", {}).rdata == b""


def test_srv_record_priority_weight():
    record = srv_record("x.local", "h.local", 80, priority=1, weight=2)
    assert record.rdata == bytes.fromhex("0001 0002 0050") + b"\x01h\x05local\x00"


def test_ptr_record():
    record = ptr_record("_t._tcp.local", "i._t._tcp.local")
    assert record.type == TYPE_PTR
    assert record.rdata == b"\x01i\x02_t\x04_tcp\x05local\x00"


def test_a_record():
    assert a_record("h.local", "0.0.0.255").rdata == b"\x00\x00\x00\xff"


@pytest.mark.parametrize(
    "service_name, device_name",
    [
        ("OPPO-Pad.local", "OPPO-Pad"),
        ("Living Room._airplay._tcp.local", "Living Room"),
        ("Receiver", "Receiver"),
        (".local", DEFAULT_DEVICE_NAME),
    ],
)
def test_device_name(service_name, device_name):
    descriptor = make_descriptor(service_name=service_name)
    assert descriptor.device_name == device_name
    assert descriptor.host_name == f"{device_name}.local"


def test_default_service_type(descriptor):
    assert descriptor.service_type == "_airplay._tcp.local"


def test_descriptor_is_frozen(descriptor):
    with pytest.raises(AttributeError):
        descriptor.port = 7001


@pytest.mark.parametrize(
    "overrides",
    [
        {"service_name": ""},
        {"port": -1},
        {"port": 65536},
        {"port": "7000"},
        {"host_address": ""},
        {"host_address": "192.168.1.300"},
        {"host_address": "192.168.1"},
        {"host_address": "pad.local"},
        {"service_name": "x" * 64 + "._airplay._tcp.local"},
        {"txt_records": {"key": "v" * 252}},
        {"txt_records": ["deviceid=AA:BB"]},
    ],
)
def test_invalid_descriptor(overrides):
    with pytest.raises(ValueError):
        make_descriptor(**overrides)


def test_maximum_txt_string():
    descriptor = make_descriptor(txt_records={"key": "v" * 251})
    _, _, txt, _ = build_announcement(descriptor)
    assert txt.rdata[0] == 255


def test_instance_name():
    assert instance_name("OPPO-Pad") == "OPPO-Pad._airplay._tcp.local"


def test_instance_name_too_long():
    with pytest.raises(ValueError):
        instance_name("x" * 64)


def test_txt_records_are_copied():
    txt_records = {"deviceid": "AA:BB"}
    descriptor = make_descriptor(txt_records=txt_records)
    txt_records["features"] = "v" * 300
    assert descriptor.txt_records == {"deviceid": "AA:BB"}
    _, _, txt, _ = build_announcement(descriptor)
    assert txt.rdata == b"\x0edeviceid=AA:BB"
