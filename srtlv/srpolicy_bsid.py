"""Binding SID Sub-TLV of an SR Policy candidate path."""

from __future__ import annotations

import base64
import json
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Union

from srtlv.srv6_tlvs import EndpointBehavior, _b64, _uint


class BSIDType(IntEnum):
    """Kind of value a Binding SID Sub-TLV carries."""

    NOBSID = 1
    LABELBSID = 2
    SRV6BSID = 3


@dataclass
class NoBSID:
    """Binding SID Sub-TLV that carries flags only."""

    flags: int = 0

    @property
    def type(self) -> BSIDType:
        return BSIDType.NOBSID

    @property
    def sid_bytes(self) -> bytes:
        """No SID is carried, so the value is empty."""
        return bytes()

    def to_dict(self) -> dict:
        return {"flags": self.flags} if self.flags else {}


@dataclass
class LabelBSID:
    """Binding SID Sub-TLV that carries an MPLS label."""

    flags: int = 0
    label: int = 0

    @property
    def type(self) -> BSIDType:
        return BSIDType.LABELBSID

    @property
    def sid_bytes(self) -> bytes:
        return struct.pack("!I", self.label)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.flags:
            result["flags"] = self.flags
        if self.label:
            result["label_bsid"] = self.label
        return result


@dataclass
class SRv6BSID:
    """Binding SID Sub-TLV that carries a 16-byte SRv6 SID."""

    flags: int = 0
    sid: bytes = b""
    endpoint_behavior: Optional[EndpointBehavior] = None

    @property
    def type(self) -> BSIDType:
        return BSIDType.SRV6BSID

    @property
    def sid_bytes(self) -> bytes:
        return self.sid

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.flags:
            result["flags"] = self.flags
        if self.sid:
            result["srv6_bsid"] = base64.b64encode(self.sid).decode("ascii")
        return result


BSID = Union[NoBSID, LabelBSID, SRv6BSID]


@dataclass
class BindingSID:
    """A Binding SID together with its kind."""

    type: BSIDType
    bsid: BSID

    def to_dict(self) -> dict:
        try:
            kind = BSIDType(self.type)
        except ValueError:
            raise ValueError(f"unknown type of bsid {self.type}") from None
        if self.bsid.type != kind:
            raise ValueError(
                f"bsid of type {int(self.bsid.type)} does not match declared type {int(kind)}"
            )
        return {"bsid_type": int(kind), "bsid": self.bsid.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def binding_sid_from_json(text: Union[str, bytes, dict]) -> BindingSID:
    """Build a BindingSID from its JSON text; bsid_type is mandatory."""
    obj = text if isinstance(text, dict) else json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("Binding SID must be a JSON object")
    if "bsid_type" not in obj:
        raise ValueError("Binding SID is missing mandatory bsid_type field")
    raw_type = obj["bsid_type"]
    if isinstance(raw_type, bool) or not isinstance(raw_type, int):
        raise ValueError(f"invalid value {raw_type!r} for field 'bsid_type'")
    try:
        kind = BSIDType(raw_type)
    except ValueError:
        raise ValueError(f"unknown type of bsid {raw_type}") from None
    raw = obj.get("bsid")
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("invalid value for field 'bsid'")
    sid: BSID
    if kind is BSIDType.NOBSID:
        sid = NoBSID(flags=_uint(raw, "flags", 8))
    elif kind is BSIDType.LABELBSID:
        sid = LabelBSID(flags=_uint(raw, "flags", 8), label=_uint(raw, "label_bsid", 32))
    else:
        sid = SRv6BSID(flags=_uint(raw, "flags", 8), sid=_b64(raw, "srv6_bsid"))
    return BindingSID(type=kind, bsid=sid)


def unmarshal_bsid_stlv(data: bytes) -> BSID:
    """Decode a Binding SID Sub-TLV value; its length selects the kind."""
    if len(data) == 2:
        return NoBSID(flags=data[0])
    if len(data) == 6:
        (value,) = struct.unpack_from("!I", data, 2)
        return LabelBSID(flags=data[0], label=value >> 12)
    if len(data) == 18:
        return SRv6BSID(flags=data[0], sid=bytes(data[2:18]))
    raise ValueError("invalid length of binding sid stlv")