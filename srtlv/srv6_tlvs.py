"""SRv6 BGP-LS TLVs: SID Structure, End.X SID, Capability, Endpoint Behavior, BGP Peer Node SID."""

from __future__ import annotations

import base64
import binascii
import ipaddress
import json
import struct
from dataclasses import dataclass
from typing import Any, Optional, Union

SID_STRUCTURE_TLV_TYPE = 1252
END_X_SID_TLV_MIN_LEN = 22


def _uint(obj: dict, key: str, bits: int, default: int = 0) -> int:
    """Read an unsigned integer of the given width from a decoded JSON object."""
    value = obj.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < (1 << bits):
        raise ValueError(f"invalid value {value!r} for field {key!r}")
    return value


def _bool(obj: dict, key: str, default: bool = False) -> bool:
    value = obj.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"invalid value {value!r} for field {key!r}")
    return value


def _b64(obj: dict, key: str) -> bytes:
    value = obj.get(key)
    if value is None:
        return b""
    if not isinstance(value, str):
        raise ValueError(f"invalid value {value!r} for field {key!r}")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 in field {key!r}") from exc


def _ipv6_text(raw: bytes) -> str:
    """Format 16 bytes as an address, showing IPv4-mapped addresses in dotted form."""
    addr = ipaddress.IPv6Address(raw)
    if addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)


@dataclass
class SIDStructure:
    """SRv6 SID Structure TLV (type 1252)."""

    type: int = 0
    length: int = 0
    lb_length: int = 0
    ln_length: int = 0
    fun_length: int = 0
    arg_length: int = 0

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.type:
            result["type"] = self.type
        if self.length:
            result["length"] = self.length
        result["locator_block_length"] = self.lb_length
        result["locator_node_length"] = self.ln_length
        result["function_length"] = self.fun_length
        result["argument_length"] = self.arg_length
        return result


@dataclass
class UnknownSRv6SubTLV:
    """A Sub TLV whose type is not decoded; length includes the 4-byte header."""

    type: int = 0
    length: int = 0
    value: bytes = b""

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.type:
            result["type"] = self.type
        if self.length:
            result["length"] = self.length
        if self.value:
            result["value"] = base64.b64encode(self.value).decode("ascii")
        return result


SubTLV = Union[SIDStructure, UnknownSRv6SubTLV]


def unmarshal_sid_structure_tlv(data: bytes) -> SIDStructure:
    """Decode the value part of a SID Structure TLV."""
    if len(data) < 4:
        raise ValueError("not enough bytes to unmarshal SRv6 SID Structure TLV")
    return SIDStructure(
        lb_length=data[0],
        ln_length=data[1],
        fun_length=data[2],
        arg_length=data[3],
    )


def sid_structure_from_json(obj: dict) -> SIDStructure:
    """Build a SIDStructure from a decoded JSON object."""
    return SIDStructure(
        type=_uint(obj, "type", 16),
        length=_uint(obj, "length", 16),
        lb_length=_uint(obj, "locator_block_length", 8),
        ln_length=_uint(obj, "locator_node_length", 8),
        fun_length=_uint(obj, "function_length", 8),
        arg_length=_uint(obj, "argument_length", 8),
    )


def unmarshal_srv6_subtlv(data: bytes) -> SubTLV:
    """Decode one SRv6 Sub TLV starting at the beginning of data."""
    if len(data) < 4:
        raise ValueError("not enough bytes to unmarshal SRv6 Sub TLV")
    tlv_type, length = struct.unpack_from("!HH", data, 0)
    if 4 + length > len(data):
        raise ValueError("not enough bytes to unmarshal SRv6 Sub TLV")
    value = bytes(data[4 : 4 + length])
    if tlv_type == SID_STRUCTURE_TLV_TYPE:
        stlv = unmarshal_sid_structure_tlv(value)
        stlv.type = tlv_type
        stlv.length = length + 4
        return stlv
    return UnknownSRv6SubTLV(type=tlv_type, length=length + 4, value=value)


def unmarshal_all_srv6_subtlvs(data: bytes) -> Optional[list[SubTLV]]:
    """Decode consecutive Sub TLVs; returns None when there are none."""
    stlvs: list[SubTLV] = []
    pos = 0
    while pos < len(data):
        stlv = unmarshal_srv6_subtlv(data[pos:])
        pos += stlv.length
        stlvs.append(stlv)
    return stlvs or None


def subtlvs_from_json(items: list) -> Optional[list[SubTLV]]:
    """Build Sub TLVs from a list of decoded JSON objects; returns None when empty."""
    result: list[SubTLV] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("sub-tlv must be a JSON object")
        if "type" not in item:
            raise ValueError("sub-tlv is missing mandatory type field")
        tlv_type = _uint(item, "type", 16)
        if "length" not in item:
            raise ValueError("sub-tlv is missing mandatory length field")
        length = _uint(item, "length", 16)
        if tlv_type == SID_STRUCTURE_TLV_TYPE:
            result.append(sid_structure_from_json(item))
        else:
            result.append(
                UnknownSRv6SubTLV(type=tlv_type, length=length, value=_b64(item, "value"))
            )
    return result or None


@dataclass
class EndXSIDFlags:
    """End.X SID flags: B, S and P."""

    b_flag: bool = False
    s_flag: bool = False
    p_flag: bool = False


def _flags_to_dict(flags: EndXSIDFlags) -> dict:
    return {"b_flag": flags.b_flag, "s_flag": flags.s_flag, "p_flag": flags.p_flag}


def unmarshal_endx_sid_flags(data: bytes) -> EndXSIDFlags:
    """Decode End.X SID flags from the first byte."""
    if len(data) < 1:
        raise ValueError("not enough bytes to unmarshal SRv6 End.X SID Flags")
    b = data[0]
    return EndXSIDFlags(
        b_flag=b & 0x80 == 0x80,
        s_flag=b & 0x40 == 0x40,
        p_flag=b & 0x20 == 0x20,
    )


@dataclass
class EndXSIDTLV:
    """SRv6 End.X SID TLV."""

    type: int = 0
    length: int = 0
    endpoint_behavior: int = 0
    flags: Optional[EndXSIDFlags] = None
    algorithm: int = 0
    weight: int = 0
    sid: str = ""
    sub_tlvs: Optional[list[SubTLV]] = None

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.type:
            result["type"] = self.type
        if self.length:
            result["length"] = self.length
        result["endpoint_behavior"] = self.endpoint_behavior
        if self.flags is not None:
            result["flags"] = _flags_to_dict(self.flags)
        result["algorithm"] = self.algorithm
        result["weight"] = self.weight
        if self.sid:
            result["sid"] = self.sid
        if self.sub_tlvs:
            result["sub_tlvs"] = [s.to_dict() for s in self.sub_tlvs]
        return result


def unmarshal_srv6_endx_sid_tlv(data: bytes) -> EndXSIDTLV:
    """Decode the value part of an End.X SID TLV."""
    if len(data) < END_X_SID_TLV_MIN_LEN:
        raise ValueError(
            f"invalid length of data {len(data)}, expected minimum of {END_X_SID_TLV_MIN_LEN}"
        )
    (endpoint_behavior,) = struct.unpack_from("!H", data, 0)
    tlv = EndXSIDTLV(
        endpoint_behavior=endpoint_behavior,
        flags=unmarshal_endx_sid_flags(data[2:3]),
        algorithm=data[3],
        weight=data[4],
        # byte 5 is reserved
        sid=_ipv6_text(bytes(data[6:22])),
    )
    if len(data) > 22:
        tlv.sub_tlvs = unmarshal_all_srv6_subtlvs(data[22:])
    return tlv


def endx_sid_tlv_from_json(text: Union[str, bytes]) -> EndXSIDTLV:
    """Build an EndXSIDTLV from its JSON text."""
    obj = json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("End.X SID TLV must be a JSON object")
    flags = None
    raw_flags = obj.get("flags")
    if raw_flags is not None:
        if not isinstance(raw_flags, dict):
            raise ValueError("invalid value for field 'flags'")
        flags = EndXSIDFlags(
            b_flag=_bool(raw_flags, "b_flag"),
            s_flag=_bool(raw_flags, "s_flag"),
            p_flag=_bool(raw_flags, "p_flag"),
        )
    sid = obj.get("sid")
    if sid is None:
        sid = ""
    elif not isinstance(sid, str):
        raise ValueError("invalid value for field 'sid'")
    sub_tlvs = None
    raw_stlvs = obj.get("sub_tlvs")
    if raw_stlvs is not None:
        if not isinstance(raw_stlvs, list):
            raise ValueError("invalid value for field 'sub_tlvs'")
        sub_tlvs = subtlvs_from_json(raw_stlvs)
    return EndXSIDTLV(
        type=_uint(obj, "type", 16),
        length=_uint(obj, "length", 16),
        endpoint_behavior=_uint(obj, "endpoint_behavior", 16),
        flags=flags,
        algorithm=_uint(obj, "algorithm", 8),
        weight=_uint(obj, "weigh", 8),
        sid=sid,
        sub_tlvs=sub_tlvs,
    )


@dataclass
class CapabilityTLV:
    """SRv6 Capability TLV."""

    o_flag: bool = False


def unmarshal_srv6_capability_tlv(data: bytes) -> CapabilityTLV:
    """Decode an SRv6 Capability TLV value."""
    if len(data) < 4:
        raise ValueError("not enough bytes to decode SRv6 Capability TLV")
    return CapabilityTLV(o_flag=data[0] & 0x40 == 0x40)


@dataclass
class EndpointBehavior:
    """SRv6 Endpoint Behavior TLV."""

    endpoint_behavior: int = 0
    flag: int = 0
    algorithm: int = 0


def unmarshal_srv6_endpoint_behavior_tlv(data: bytes) -> EndpointBehavior:
    """Decode an SRv6 Endpoint Behavior TLV value."""
    if len(data) < 4:
        raise ValueError("not enough bytes to decode SRv6 Endpoint Behavior TLV")
    (behavior,) = struct.unpack_from("!H", data, 0)
    return EndpointBehavior(endpoint_behavior=behavior, flag=data[2], algorithm=data[3])


@dataclass
class BGPPeerNodeFlags:
    """BGP Peer Node SID flags: B, S and P."""

    b_flag: bool = False
    s_flag: bool = False
    p_flag: bool = False


def unmarshal_bgp_peer_node_flags(data: bytes) -> BGPPeerNodeFlags:
    """Decode BGP Peer Node SID flags from the first byte."""
    if len(data) < 1:
        raise ValueError("not enough bytes to unmarshal BGP Peer Node SID Flags")
    b = data[0]
    return BGPPeerNodeFlags(
        b_flag=b & 0x80 == 0x80,
        s_flag=b & 0x40 == 0x40,
        p_flag=b & 0x20 == 0x20,
    )


@dataclass
class BGPPeerNodeSID:
    """SRv6 BGP Peer Node SID TLV."""

    flags: BGPPeerNodeFlags
    weight: int = 0
    peer_asn: int = 0
    peer_id: bytes = b""


def unmarshal_srv6_bgp_peer_node_sid_tlv(data: bytes) -> BGPPeerNodeSID:
    """Decode an SRv6 BGP Peer Node SID TLV value."""
    flags = unmarshal_bgp_peer_node_flags(data[:1])
    if len(data) < 11:
        raise ValueError("not enough bytes to unmarshal SRv6 BGP Peer Node SID TLV")
    (peer_asn,) = struct.unpack_from("!I", data, 3)
    return BGPPeerNodeSID(
        flags=flags,
        weight=data[1],
        peer_asn=peer_asn,
        peer_id=bytes(data[7:11]),
    )