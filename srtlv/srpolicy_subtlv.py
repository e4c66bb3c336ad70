"""SR Policy candidate path Sub-TLVs: Preference, Weight and ENLP."""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass
from typing import Any, Union

from srtlv.srv6_tlvs import _uint


@dataclass
class Preference:
    """Preference of an SR Policy candidate path."""

    flags: int = 0
    preference: int = 0

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"flags": self.flags}
        if self.preference:
            result["preference"] = self.preference
        return result


def unmarshal_preference_stlv(data: bytes) -> Preference:
    """Decode a Preference Sub-TLV value: flags, reserved byte, 4-byte preference."""
    if len(data) != 6:
        raise ValueError("invalid length of preference stlv")
    (preference,) = struct.unpack_from("!I", data, 2)
    return Preference(flags=data[0], preference=preference)


@dataclass
class Weight:
    """Weight associated with a segment list."""

    flags: int = 0
    weight: int = 0

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.flags:
            result["flags"] = self.flags
        if self.weight:
            result["weight"] = self.weight
        return result


def weight_from_json(text: Union[str, bytes, dict]) -> Weight:
    """Build a Weight from its JSON text or an already decoded object."""
    obj = text if isinstance(text, dict) else json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("Weight must be a JSON object")
    return Weight(flags=_uint(obj, "flags", 8), weight=_uint(obj, "weight", 32))


@dataclass
class ENLP:
    """Explicit NULL Label Policy."""

    flags: int = 0
    enlp: int = 0

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.flags:
            result["flags"] = self.flags
        if self.enlp:
            result["enlp"] = self.enlp
        return result