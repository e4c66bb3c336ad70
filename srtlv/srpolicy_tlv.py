"""SR Policy Tunnel Encapsulation attribute and its candidate path Sub-TLVs."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Any, Optional

from srtlv.srpolicy_bsid import BindingSID, unmarshal_bsid_stlv
from srtlv.srpolicy_segment import SegmentList, unmarshal_segment_list_stlv
from srtlv.srpolicy_subtlv import ENLP, Preference, unmarshal_preference_stlv

logger = logging.getLogger(__name__)

SR_POLICY_TUNNEL_TYPE = 15
WEIGHT_STLV = 9
SEGMENT_LIST_STLV = 128
BSID_STLV = 13
SRV6_STLV = 255
PREFERENCE_STLV = 12
ENLP_STLV = 14
PRIORITY_STLV = 15
PATH_NAME_STLV = 129
POLICY_NAME_STLV = 254


@dataclass
class TLV:
    """Information about an SR Policy candidate path."""

    preference: Optional[Preference] = None
    binding_sid: Optional[BindingSID] = None
    name: str = ""
    path_name: str = ""
    priority: int = 0
    enlp: Optional[ENLP] = None
    segment_list: list[SegmentList] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.preference is not None:
            result["preference_subtlv"] = self.preference.to_dict()
        if self.binding_sid is not None:
            result["binding_sid_subtlv"] = self.binding_sid.to_dict()
        if self.name:
            result["policy_name_subtlv"] = self.name
        if self.path_name:
            result["path_name_subtlv"] = self.path_name
        if self.priority:
            result["priority_subtlv"] = self.priority
        if self.enlp is not None:
            result["enlp_subtlv"] = self.enlp.to_dict()
        if self.segment_list:
            result["segment_list"] = [s.to_dict() for s in self.segment_list]
        return result


def _take(data: bytes, start: int, length: int, kind: int) -> bytes:
    if length < 0 or start + length > len(data):
        raise ValueError(f"not enough bytes to decode SR Policy Sub TLV {kind}")
    return bytes(data[start : start + length])


def unmarshal_sr_policy_tlv(data: bytes) -> Optional[TLV]:
    """Decode an SR Policy Tunnel Encapsulation TLV; empty input yields None."""
    # MP_UNREACH carries no TLVs, so an empty attribute is valid.
    if len(data) == 0:
        return None
    if len(data) < 4:
        raise ValueError(f"invalid data length {len(data)}")
    tunnel_type, length = struct.unpack_from("!HH", data, 0)
    if tunnel_type != SR_POLICY_TUNNEL_TYPE:
        raise ValueError(f"unexpected tunnel type {tunnel_type}")
    if length + 4 != len(data):
        raise ValueError(
            f"encoded in data length: {length + 4} does not match "
            f"with actual data length {len(data)}"
        )
    tlv = TLV()
    pos = 4
    while pos < len(data):
        kind = data[pos]
        pos += 1
        if kind == SEGMENT_LIST_STLV:
            header = _take(data, pos, 3, kind)
            (sub_len,) = struct.unpack_from("!H", header, 0)
            pos += 3  # length and reserved byte
            if sub_len < 1:
                raise ValueError(f"invalid length {sub_len} of Segment List Sub TLV")
            value = _take(data, pos, sub_len - 1, kind)
            tlv.segment_list.append(unmarshal_segment_list_stlv(value))
            pos += sub_len - 1
            continue
        sub_len = _take(data, pos, 1, kind)[0]
        pos += 1
        value = _take(data, pos, sub_len, kind)
        if kind == BSID_STLV:
            sid = unmarshal_bsid_stlv(value)
            tlv.binding_sid = BindingSID(type=sid.type, bsid=sid)
        elif kind == PREFERENCE_STLV:
            tlv.preference = unmarshal_preference_stlv(value)
        elif kind == ENLP_STLV:
            if tlv.enlp is not None:
                raise ValueError("only 1 instance of ENLP allowed in SR Policy attributes")
            if len(value) < 3:
                raise ValueError(f"invalid length {sub_len} of ENLP Sub TLV")
            tlv.enlp = ENLP(flags=value[0], enlp=value[2])
        elif kind == PRIORITY_STLV:
            if len(value) < 1:
                raise ValueError(f"invalid length {sub_len} of Priority Sub TLV")
            tlv.priority = value[0]
        elif kind == PATH_NAME_STLV:
            tlv.path_name = value.decode("utf-8", errors="replace")
        else:
            logger.warning("SR Policy Sub TLV %d is not supported", kind)
        pos += sub_len
    return tlv