"""SRv6 L2 and L3 Service TLVs carried in the BGP Prefix-SID attribute."""

from __future__ import annotations

import base64
import json
import struct
from dataclasses import dataclass, field
from typing import Any, Union

from srtlv.srv6_tlvs import _ipv6_text, _uint

SID_INFORMATION_SUBTLV_TYPE = 1
SID_STRUCTURE_SUBSUBTLV_TYPE = 1

SvcSubTLV = Union["InformationSubTLV", bytes]
SvcSubSubTLV = Union["SIDStructureSubSubTLV", bytes]


def _load_object(text: Union[str, bytes, dict], what: str) -> dict:
    obj = text if isinstance(text, dict) else json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError(f"{what} must be a JSON object")
    return obj


def _type_key(key: str) -> int:
    try:
        return int(key)
    except ValueError as exc:
        raise ValueError(f"invalid type key {key!r}") from exc


def _raw_to_json(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    return value.to_dict()


def _iter_tlvs(data: bytes, start: int, what: str):
    """Yield (type, value) pairs of TLVs with a 1-byte type and a 2-byte length."""
    pos = start
    while pos < len(data):
        if pos + 3 > len(data):
            raise ValueError(f"not enough bytes to decode {what}")
        tlv_type = data[pos]
        (length,) = struct.unpack_from("!H", data, pos + 1)
        pos += 3
        if pos + length > len(data):
            raise ValueError(f"not enough bytes to decode {what}")
        yield tlv_type, bytes(data[pos : pos + length])
        pos += length


@dataclass
class SIDStructureSubSubTLV:
    """SID Structure Sub-Sub-TLV of an SRv6 Service."""

    local_block_length: int = 0
    local_node_length: int = 0
    function_length: int = 0
    argument_length: int = 0
    transposition_length: int = 0
    transposition_offset: int = 0

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.local_block_length:
            result["locator_block_length"] = self.local_block_length
        if self.local_node_length:
            result["locator_node_length"] = self.local_node_length
        if self.function_length:
            result["function_length"] = self.function_length
        result["argument_length"] = self.argument_length
        if self.transposition_length:
            result["transposition_length"] = self.transposition_length
        if self.transposition_offset:
            result["transposition_offset"] = self.transposition_offset
        return result


def unmarshal_sid_structure_subsubtlv(data: bytes) -> SIDStructureSubSubTLV:
    """Decode the value part of a SID Structure Sub-Sub-TLV."""
    if len(data) < 6:
        raise ValueError("not enough bytes to decode SID Structure Sub Sub TLV")
    return SIDStructureSubSubTLV(*data[:6])


def _sid_structure_from_obj(obj: Any) -> SIDStructureSubSubTLV:
    if not isinstance(obj, dict):
        raise ValueError("SID Structure Sub Sub TLV must be a JSON object")
    return SIDStructureSubSubTLV(
        local_block_length=_uint(obj, "locator_block_length", 8),
        local_node_length=_uint(obj, "locator_node_length", 8),
        function_length=_uint(obj, "function_length", 8),
        argument_length=_uint(obj, "argument_length", 8),
        transposition_length=_uint(obj, "transposition_length", 8),
        transposition_offset=_uint(obj, "transposition_offset", 8),
    )


@dataclass
class InformationSubTLV:
    """SRv6 SID Information Sub-TLV (type 1)."""

    sid: str = ""
    flags: int = 0
    endpoint_behavior: int = 0
    sub_sub_tlvs: dict[int, list[SvcSubSubTLV]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.sid:
            result["sid"] = self.sid
        if self.flags:
            result["flags"] = self.flags
        if self.endpoint_behavior:
            result["endpoint_behavior"] = self.endpoint_behavior
        if self.sub_sub_tlvs:
            result["sub_sub_tlvs"] = {
                str(t): [_raw_to_json(v) for v in values]
                for t, values in self.sub_sub_tlvs.items()
            }
        return result


def unmarshal_srv6_l3_service_subsubtlvs(data: bytes) -> dict[int, list[SvcSubSubTLV]]:
    """Decode Sub-Sub-TLVs; the first byte is reserved and skipped."""
    result: dict[int, list[SvcSubSubTLV]] = {}
    for tlv_type, value in _iter_tlvs(data, 1, "SRv6 L3 Service Sub Sub TLV"):
        item: SvcSubSubTLV
        if tlv_type == SID_STRUCTURE_SUBSUBTLV_TYPE:
            item = unmarshal_sid_structure_subsubtlv(value)
        else:
            item = value
        result.setdefault(tlv_type, []).append(item)
    return result


def unmarshal_information_subtlv(data: bytes) -> InformationSubTLV:
    """Decode the value part of an SRv6 SID Information Sub-TLV."""
    if len(data) < 20:
        raise ValueError("not enough bytes to decode SRv6 SID Information Sub TLV")
    (behavior,) = struct.unpack_from("!H", data, 18)
    tlv = InformationSubTLV(
        sid=_ipv6_text(bytes(data[1:17])),
        flags=data[17],
        endpoint_behavior=behavior,
    )
    if len(data) > 20:
        tlv.sub_sub_tlvs = unmarshal_srv6_l3_service_subsubtlvs(data[20:])
    return tlv


def _information_from_obj(obj: Any) -> InformationSubTLV:
    if not isinstance(obj, dict):
        raise ValueError("SRv6 SID Information Sub TLV must be a JSON object")
    sid = obj.get("sid")
    if sid is None:
        sid = ""
    elif not isinstance(sid, str):
        raise ValueError("invalid value for field 'sid'")
    tlv = InformationSubTLV(
        sid=sid,
        flags=_uint(obj, "flags", 8),
        endpoint_behavior=_uint(obj, "endpoint_behavior", 16),
    )
    raw = obj.get("sub_sub_tlvs")
    if not isinstance(raw, dict):
        return tlv
    for key, values in raw.items():
        tlv_type = _type_key(key)
        if tlv_type != SID_STRUCTURE_SUBSUBTLV_TYPE:
            raise ValueError(f"unknown SRv6 L3 Service Sub Sub TLV type {tlv_type}")
        if values is None:
            values = []
        if not isinstance(values, list):
            raise ValueError("Sub Sub TLVs must be a JSON array")
        tlv.sub_sub_tlvs.setdefault(tlv_type, []).extend(
            _sid_structure_from_obj(v) for v in values
        )
    return tlv


def information_subtlv_from_json(text: Union[str, bytes, dict]) -> InformationSubTLV:
    """Build an InformationSubTLV from its JSON text."""
    return _information_from_obj(_load_object(text, "SRv6 SID Information Sub TLV"))


@dataclass
class L3Service:
    """SRv6 L3 Service TLV: Sub-TLVs grouped by type."""

    sub_tlvs: dict[int, list[SvcSubTLV]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        if not self.sub_tlvs:
            return {}
        return {
            "sub_tlvs": {
                str(t): [_raw_to_json(v) for v in values]
                for t, values in self.sub_tlvs.items()
            }
        }


@dataclass
class L2Service:
    """SRv6 L2 Service TLV; carries no decoded fields."""


def unmarshal_srv6_l3_service_subtlvs(data: bytes) -> dict[int, list[SvcSubTLV]]:
    """Decode consecutive L3 Service Sub-TLVs, grouped by type."""
    result: dict[int, list[SvcSubTLV]] = {}
    for tlv_type, value in _iter_tlvs(data, 0, "SRv6 L3 Service Sub TLV"):
        item: SvcSubTLV
        if tlv_type == SID_INFORMATION_SUBTLV_TYPE:
            item = unmarshal_information_subtlv(value)
        else:
            item = value
        result.setdefault(tlv_type, []).append(item)
    return result


def unmarshal_srv6_l3_service(data: bytes) -> L3Service:
    """Decode an SRv6 L3 Service TLV value; the first byte is reserved."""
    if len(data) < 1:
        raise ValueError("not enough bytes to decode SRv6 L3 Service")
    return L3Service(sub_tlvs=unmarshal_srv6_l3_service_subtlvs(data[1:]))


def l3_service_from_json(text: Union[str, bytes, dict]) -> L3Service:
    """Build an L3Service from its JSON text."""
    obj = _load_object(text, "SRv6 L3 Service")
    if "sub_tlvs" not in obj:
        raise ValueError("SRv6 L3 Service is missing sub_tlvs field")
    raw = obj["sub_tlvs"]
    service = L3Service()
    if raw is None:
        return service
    if not isinstance(raw, dict):
        raise ValueError("invalid value for field 'sub_tlvs'")
    for key, values in raw.items():
        tlv_type = _type_key(key)
        if tlv_type != SID_INFORMATION_SUBTLV_TYPE:
            raise ValueError(f"unknown SRv6 L3 Service Sub TLV type {tlv_type}")
        if values is None:
            values = []
        if not isinstance(values, list):
            raise ValueError("Sub TLVs must be a JSON array")
        service.sub_tlvs.setdefault(tlv_type, []).extend(
            _information_from_obj(v) for v in values
        )
    return service