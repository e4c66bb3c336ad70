import base64
import json

import pytest

from srtlv.srpolicy_bsid import (
    BindingSID,
    BSIDType,
    LabelBSID,
    NoBSID,
    SRv6BSID,
    binding_sid_from_json,
    unmarshal_bsid_stlv,
)

SRV6_SID = bytes([0x20, 0x01, 0x04, 0x20, 0xFF, 0xFF, 0x10, 0x13] + [0] * 7 + [0x01])


def test_label_bsid_from_wire():
    sid = unmarshal_bsid_stlv(bytes([0x00, 0x00, 0xDB, 0xBA, 0x00, 0x00]))
    assert isinstance(sid, LabelBSID)
    assert sid.type is BSIDType.LABELBSID
    assert sid.label == 0xDBBA0
    assert sid.sid_bytes == bytes([0x00, 0x0D, 0xBB, 0xA0])


def test_srv6_bsid_from_wire():
    sid = unmarshal_bsid_stlv(bytes([0x80, 0x00]) + SRV6_SID)
    assert isinstance(sid, SRv6BSID)
    assert sid.type is BSIDType.SRV6BSID
    assert sid.flags == 0x80
    assert sid.sid == SRV6_SID
    assert sid.sid_bytes == SRV6_SID


@pytest.mark.parametrize("length", [0, 1, 3, 5, 7, 17, 19])
def test_invalid_length(length):
    with pytest.raises(ValueError):
        unmarshal_bsid_stlv(bytes(length))


def test_label_binding_sid_to_dict():
    bsid = BindingSID(type=BSIDType.LABELBSID, bsid=LabelBSID(flags=0, label=24000))
    assert bsid.to_dict() == {"bsid_type": 2, "bsid": {"label_bsid": 24000}}


def test_no_bsid_without_flags_omits_them():
    bsid = BindingSID(type=BSIDType.NOBSID, bsid=NoBSID())
    assert bsid.to_dict() == {"bsid_type": 1, "bsid": {}}


def test_srv6_binding_sid_encodes_base64():
    bsid = BindingSID(type=BSIDType.SRV6BSID, bsid=SRv6BSID(flags=0x40, sid=SRV6_SID))
    out = json.loads(bsid.to_json())
    assert out["bsid_type"] == 3
    assert out["bsid"]["flags"] == 0x40
    assert base64.b64decode(out["bsid"]["srv6_bsid"]) == SRV6_SID


@pytest.mark.parametrize(
    "bsid",
    [
        BindingSID(type=BSIDType.NOBSID, bsid=NoBSID(flags=0x80)),
        BindingSID(type=BSIDType.LABELBSID, bsid=LabelBSID(flags=0x40, label=24000)),
        BindingSID(type=BSIDType.SRV6BSID, bsid=SRv6BSID(flags=0x20, sid=SRV6_SID)),
    ],
)
def test_json_round_trip(bsid):
    assert binding_sid_from_json(bsid.to_json()) == bsid


def test_from_json_without_bsid_gives_empty_value():
    got = binding_sid_from_json('{"bsid_type": 2}')
    assert got == BindingSID(type=BSIDType.LABELBSID, bsid=LabelBSID())


def test_from_json_missing_type():
    with pytest.raises(ValueError):
        binding_sid_from_json('{"bsid": {"flags": 1}}')


def test_from_json_unknown_type():
    with pytest.raises(ValueError, match="unknown type of bsid"):
        binding_sid_from_json('{"bsid_type": 7}')


def test_from_json_flags_out_of_range():
    with pytest.raises(ValueError):
        binding_sid_from_json('{"bsid_type": 1, "bsid": {"flags": 300}}')


def test_to_dict_unknown_type():
    with pytest.raises(ValueError, match="unknown type of bsid"):
        BindingSID(type=9, bsid=NoBSID()).to_dict()


def test_to_dict_mismatched_type():
    with pytest.raises(ValueError):
        BindingSID(type=BSIDType.LABELBSID, bsid=NoBSID()).to_dict()


def test_wire_value_round_trips_through_json():
    sid = unmarshal_bsid_stlv(bytes([0x00, 0x00, 0xDB, 0xBA, 0x00, 0x00]))
    bsid = BindingSID(type=sid.type, bsid=sid)
    assert binding_sid_from_json(bsid.to_json()).bsid == sid