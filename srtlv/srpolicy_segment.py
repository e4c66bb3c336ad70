"""Segment List Sub-TLV and Segment Sub-TLVs of an SR Policy candidate path."""

from __future__ import annotations

import json
import logging
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union

from srtlv.srpolicy_subtlv import Weight, weight_from_json
from srtlv.srv6_tlvs import _bool, _uint

logger = logging.getLogger(__name__)

WEIGHT_STLV = 9


class SegmentType(IntEnum):
    """Segment Sub-TLV types."""

    TYPE_A = 1
    TYPE_B = 13
    TYPE_C = 3
    TYPE_D = 4
    TYPE_E = 5
    TYPE_F = 6
    TYPE_G = 7
    TYPE_H = 8
    TYPE_I = 14
    TYPE_J = 15
    TYPE_K = 16


_SEGMENT_TYPES = {int(t) for t in SegmentType}


@dataclass
class SegmentFlags:
    """Flags a segment can carry: V, A, S and B."""

    v_flag: bool = False
    a_flag: bool = False
    s_flag: bool = False
    b_flag: bool = False

    def to_dict(self) -> dict:
        return {
            "v_flag": self.v_flag,
            "a_flag": self.a_flag,
            "s_flag": self.s_flag,
            "b_flag": self.b_flag,
        }


def new_segment_flags(value: int) -> SegmentFlags:
    """Decode segment flags from a flags byte."""
    return SegmentFlags(
        v_flag=value & 0x80 == 0x80,
        a_flag=value & 0x40 == 0x40,
        s_flag=value & 0x20 == 0x20,
        b_flag=value & 0x10 == 0x10,
    )


@dataclass
class TypeASegment:
    """Type A segment: a single SR-MPLS SID."""

    flags: Optional[SegmentFlags] = None
    label: int = 0
    tc: int = 0
    s: bool = False
    ttl: int = 0

    @property
    def type(self) -> SegmentType:
        return SegmentType.TYPE_A

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"segment_type": int(SegmentType.TYPE_A)}
        if self.flags is not None:
            result["flags"] = self.flags.to_dict()
        if self.label:
            result["label"] = self.label
        if self.tc:
            result["tc"] = self.tc
        if self.s:
            result["s"] = self.s
        if self.ttl:
            result["ttl"] = self.ttl
        return result


Segment = TypeASegment


def unmarshal_type_a_segment(data: bytes) -> TypeASegment:
    """Decode a Type A Segment Sub-TLV value: flags, reserved byte, label entry."""
    if len(data) != 6:
        raise ValueError("invalid length of Type A Segment STLV")
    (entry,) = struct.unpack_from("!I", data, 2)
    return TypeASegment(
        flags=new_segment_flags(data[0]),
        label=entry >> 12,
        tc=(data[4] & 0x0E) >> 1,
        s=data[4] & 0x01 == 0x01,
        ttl=data[5],
    )


@dataclass
class SegmentList:
    """One explicit path towards the endpoint."""

    weight: Optional[Weight] = None
    segments: list[Segment] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.weight is not None:
            result["weight_subtlv"] = self.weight.to_dict()
        if self.segments:
            result["segments"] = [s.to_dict() for s in self.segments]
        return result


def unmarshal_segment_list_stlv(data: bytes) -> SegmentList:
    """Decode the Sub-TLVs of a Segment List Sub-TLV."""
    result = SegmentList()
    pos = 0
    while pos < len(data):
        kind = data[pos]
        if kind != WEIGHT_STLV and kind not in _SEGMENT_TYPES:
            raise ValueError(f"unknown type of segment sub tlv {kind}")
        if kind == WEIGHT_STLV and result.weight is not None:
            raise ValueError("Segment List Sub TLV can carry a single instance of Weight")
        if pos + 2 > len(data):
            raise ValueError(f"not enough bytes to decode segment list sub tlv {kind}")
        length = data[pos + 1]
        if kind == WEIGHT_STLV and length != 6:
            raise ValueError(f"invalid length {length} of raw data for Weight Sub TLV")
        if kind == SegmentType.TYPE_A and length != 6:
            raise ValueError(
                f"invalid length {length} of raw data for Type A Segment Sub TLV"
            )
        value = bytes(data[pos + 2 : pos + 2 + length])
        if len(value) < length:
            raise ValueError(f"not enough bytes to decode segment list sub tlv {kind}")
        if kind == WEIGHT_STLV:
            (weight,) = struct.unpack_from("!I", value, 2)
            result.weight = Weight(flags=value[0], weight=weight)
        elif kind == SegmentType.TYPE_A:
            result.segments.append(unmarshal_type_a_segment(value))
        else:
            logger.info("Segment of type %s not implemented", SegmentType(kind).name)
        pos += 2 + length
    return result


def _type_a_from_obj(obj: dict) -> TypeASegment:
    flags = None
    raw_flags = obj.get("flags")
    if raw_flags is not None:
        if not isinstance(raw_flags, dict):
            raise ValueError("invalid value for field 'flags'")
        flags = SegmentFlags(
            v_flag=_bool(raw_flags, "v_flag"),
            a_flag=_bool(raw_flags, "a_flag"),
            s_flag=_bool(raw_flags, "s_flag"),
            b_flag=_bool(raw_flags, "b_flag"),
        )
    return TypeASegment(
        flags=flags,
        label=_uint(obj, "label", 32),
        tc=_uint(obj, "tc", 8),
        s=_bool(obj, "s"),
        ttl=_uint(obj, "ttl", 8),
    )


def segment_list_from_json(text: Union[str, bytes, dict]) -> SegmentList:
    """Build a SegmentList from its JSON text; only Type A segments are accepted."""
    obj = text if isinstance(text, dict) else json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("Segment List must be a JSON object")
    result = SegmentList()
    raw_weight = obj.get("weight_subtlv")
    if raw_weight is not None:
        if not isinstance(raw_weight, dict):
            raise ValueError("invalid value for field 'weight_subtlv'")
        result.weight = weight_from_json(raw_weight)
    raw_segments = obj.get("segments")
    if raw_segments is None:
        return result
    if not isinstance(raw_segments, list):
        raise ValueError("invalid value for field 'segments'")
    for item in raw_segments:
        if not isinstance(item, dict):
            raise ValueError("segment must be a JSON object")
        if "segment_type" not in item:
            raise ValueError("segment is missing mandatory segment_type field")
        kind = item["segment_type"]
        if isinstance(kind, bool) or not isinstance(kind, int):
            raise ValueError(f"invalid value {kind!r} for field 'segment_type'")
        if kind not in _SEGMENT_TYPES:
            raise ValueError(f"unknown type of segment sub tlv {kind}")
        if kind != SegmentType.TYPE_A:
            raise ValueError(f"unsupported type of segment sub tlv {kind}")
        result.segments.append(_type_a_from_obj(item))
    return result