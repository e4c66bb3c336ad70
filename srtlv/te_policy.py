"""BGP-LS TE Policy Descriptor TLVs and their decoded values."""

from __future__ import annotations

import base64
import logging
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

logger = logging.getLogger(__name__)

TUNNEL_ID_TYPE = 550
LSP_ID_TYPE = 551
TUNNEL_HEAD_END_ADDR_TYPE = 552
TUNNEL_TAIL_END_ADDR_TYPE = 553
POLICY_CANDIDATE_PATH_DESCRIPTOR_TYPE = 554
LOCAL_MPLS_CROSS_CONNECT_TYPE = 555
MPLS_CROSS_CONNECT_INTERFACE_TYPE = 556
MPLS_CROSS_CONNECT_FEC_TYPE = 557

_CANDIDATE_PATH_LENGTHS = (24, 36, 48)


@dataclass
class PolicyTLV:
    """A raw TLV from a TE Policy Descriptor."""

    type: int
    length: int
    value: bytes


class ProtocolOriginType(IntEnum):
    """Protocol that instantiated a candidate path."""

    PCEP = 1
    BGP_SR_POLICY = 2
    LOCAL = 3


@dataclass
class PolicyCandidatePathDescriptor:
    """Policy Candidate Path Descriptor TLV."""

    protocol_origin: ProtocolOriginType
    flag_e: bool = False
    flag_o: bool = False
    endpoint: bytes = b""
    color: int = 0
    originator_asn: int = 0
    originator_addr: bytes = b""
    discriminator: int = 0


def unmarshal_policy_candidate_path_descriptor(data: bytes) -> PolicyCandidatePathDescriptor:
    """Decode a Policy Candidate Path Descriptor TLV value."""
    if len(data) not in _CANDIDATE_PATH_LENGTHS:
        raise ValueError(f"invalid length of bytes {len(data)}")
    try:
        origin = ProtocolOriginType(data[0])
    except ValueError:
        raise ValueError(f"invalid protocol origin {data[0]}") from None
    flag_e = data[1] & 0x80 == 0x80
    flag_o = data[1] & 0x40 == 0x40
    endpoint_len = 16 if flag_e else 4
    originator_len = 16 if flag_o else 4
    needed = 3 + endpoint_len + 8 + originator_len + 4
    if needed > len(data):
        raise ValueError(
            f"not enough bytes {len(data)} to decode Policy Candidate Path Descriptor"
        )
    pos = 3  # origin, flags and a reserved byte
    endpoint = bytes(data[pos : pos + endpoint_len])
    pos += endpoint_len
    color, asn = struct.unpack_from("!II", data, pos)
    pos += 8
    originator = bytes(data[pos : pos + originator_len])
    pos += originator_len
    (discriminator,) = struct.unpack_from("!I", data, pos)
    return PolicyCandidatePathDescriptor(
        protocol_origin=origin,
        flag_e=flag_e,
        flag_o=flag_o,
        endpoint=endpoint,
        color=color,
        originator_asn=asn,
        originator_addr=originator,
        discriminator=discriminator,
    )


@dataclass
class PolicyDescriptor:
    """TE Policy Descriptor: its TLVs keyed by type."""

    tlvs: dict[int, PolicyTLV] = field(default_factory=dict)

    def exists(self, tlv_type: int) -> bool:
        return tlv_type in self.tlvs

    def all_tlv_ids(self) -> list[int]:
        return sorted(self.tlvs)

    def _uint16(self, tlv_type: int) -> Optional[int]:
        tlv = self.tlvs.get(tlv_type)
        if tlv is None:
            return None
        if tlv.length != 2:
            raise ValueError(f"invalid tlv {tlv.type} length {tlv.length}")
        (value,) = struct.unpack("!H", tlv.value)
        return value

    def _address(self, tlv_type: int) -> Optional[bytes]:
        tlv = self.tlvs.get(tlv_type)
        if tlv is None:
            return None
        if tlv.length not in (4, 16):
            raise ValueError(f"invalid tlv {tlv.type} length {tlv.length}")
        return tlv.value

    def tunnel_id(self) -> Optional[int]:
        """Tunnel ID, or None when absent."""
        return self._uint16(TUNNEL_ID_TYPE)

    def lsp_id(self) -> Optional[int]:
        """LSP ID, or None when absent."""
        return self._uint16(LSP_ID_TYPE)

    def tunnel_head_end_addr(self) -> Optional[bytes]:
        """Tunnel head-end address (4 or 16 bytes), or None when absent."""
        return self._address(TUNNEL_HEAD_END_ADDR_TYPE)

    def tunnel_tail_end_addr(self) -> Optional[bytes]:
        """Tunnel tail-end address (4 or 16 bytes), or None when absent."""
        return self._address(TUNNEL_TAIL_END_ADDR_TYPE)

    def policy_candidate_path_descriptor(self) -> Optional[PolicyCandidatePathDescriptor]:
        """Decoded Policy Candidate Path Descriptor, or None when absent."""
        tlv = self.tlvs.get(POLICY_CANDIDATE_PATH_DESCRIPTOR_TYPE)
        if tlv is None:
            return None
        return unmarshal_policy_candidate_path_descriptor(tlv.value)


def unmarshal_policy_descriptor(data: bytes) -> PolicyDescriptor:
    """Decode the TLVs of a TE Policy Descriptor; duplicates keep the first one."""
    tlvs: dict[int, PolicyTLV] = {}
    pos = 0
    while pos < len(data):
        if pos + 4 >= len(data):
            raise ValueError("not enough bytes to process TE Policy Descriptor")
        tlv_type, length = struct.unpack_from("!HH", data, pos)
        pos += 4
        if pos + length > len(data):
            raise ValueError("not enough bytes to process TE Policy Descriptor")
        value = bytes(data[pos : pos + length])
        pos += length
        if tlv_type in tlvs:
            logger.warning(
                "Found duplicate TLV of type %d in the list of TE Policy Descriptor's TLVs",
                tlv_type,
            )
            continue
        tlvs[tlv_type] = PolicyTLV(type=tlv_type, length=length, value=value)
    return PolicyDescriptor(tlvs=tlvs)


@dataclass
class LocalMPLSCrossConnectFEC:
    """Local MPLS Cross Connect FEC Sub-TLV."""

    flag_4: bool = False
    mask_length: int = 0
    prefix: bytes = b""

    def to_dict(self) -> dict:
        return {
            "4_flag": self.flag_4,
            "mask_length": self.mask_length,
            "prefix": base64.b64encode(self.prefix).decode("ascii"),
        }


def unmarshal_local_mpls_cross_connect_fec(data: bytes) -> LocalMPLSCrossConnectFEC:
    """Decode a FEC Sub-TLV value; the prefix is padded to 4 or 16 bytes."""
    if len(data) < 2:
        raise ValueError(
            f"invalid length {len(data)} to decode Local MPLS Cross Connect FEC Sub TLV"
        )
    flag_4 = data[0] & 0x80 == 0x80
    mask_length = data[1]
    prefix_len = (mask_length + 7) // 8
    if 2 + prefix_len != len(data):
        raise ValueError(
            f"invalid length {len(data)} to decode Local MPLS Cross Connect FEC Sub TLV"
        )
    size = 4 if flag_4 else 16
    prefix = bytes(data[2 : 2 + size]).ljust(size, b"\x00")
    return LocalMPLSCrossConnectFEC(flag_4=flag_4, mask_length=mask_length, prefix=prefix)


@dataclass
class LocalMPLSCrossConnectInterface:
    """Local MPLS Cross Connect Interface Sub-TLV."""

    flag_i: bool = False
    local_interface_id: int = 0
    interface_addr: bytes = b""

    def to_dict(self) -> dict:
        return {
            "i_flag": self.flag_i,
            "local_interface_id": self.local_interface_id,
            "interface_address": base64.b64encode(self.interface_addr).decode("ascii"),
        }


def unmarshal_local_mpls_cross_connect_interface(
    data: bytes,
) -> LocalMPLSCrossConnectInterface:
    """Decode an Interface Sub-TLV value of 9 (IPv4) or 23 (IPv6) bytes."""
    if len(data) not in (9, 23):
        raise ValueError(
            f"invalid length {len(data)} to decode Local MPLS Cross Connect Interface Sub TLV"
        )
    (interface_id,) = struct.unpack_from("!I", data, 1)
    size = 4 if len(data) == 9 else 16
    return LocalMPLSCrossConnectInterface(
        flag_i=data[0] & 0x80 == 0x80,
        local_interface_id=interface_id,
        interface_addr=bytes(data[5 : 5 + size]),
    )


CrossConnectSubTLV = Union[LocalMPLSCrossConnectFEC, LocalMPLSCrossConnectInterface]


def unmarshal_local_mpls_cross_connect_subtlvs(data: bytes) -> dict[int, CrossConnectSubTLV]:
    """Decode Local MPLS Cross Connect Sub-TLVs keyed by type."""
    result: dict[int, CrossConnectSubTLV] = {}
    pos = 0
    while pos < len(data):
        if pos + 4 > len(data):
            raise ValueError("not enough bytes to decode Local MPLS Cross Connect Sub TLVs")
        tlv_type, length = struct.unpack_from("!HH", data, pos)
        pos += 4
        if pos + length > len(data):
            raise ValueError("not enough bytes to decode Local MPLS Cross Connect Sub TLVs")
        value = bytes(data[pos : pos + length])
        if tlv_type == MPLS_CROSS_CONNECT_FEC_TYPE:
            result[tlv_type] = unmarshal_local_mpls_cross_connect_fec(value)
        elif tlv_type == MPLS_CROSS_CONNECT_INTERFACE_TYPE:
            result[tlv_type] = unmarshal_local_mpls_cross_connect_interface(value)
        else:
            raise ValueError(f"unexpected Local MPLS Cross Connect Sub TLV type {tlv_type}")
        pos += length
    return result


@dataclass
class LocalMPLSCrossConnect:
    """Local MPLS state: incoming and outgoing labels with optional Sub-TLVs."""

    incoming_label: int = 0
    outgoing_label: int = 0
    sub_tlvs: dict[int, CrossConnectSubTLV] = field(default_factory=dict)


def unmarshal_local_mpls_cross_connect(data: bytes) -> LocalMPLSCrossConnect:
    """Decode a Local MPLS Cross Connect TLV value."""
    if len(data) < 8:
        raise ValueError("not enough bytes to decode Local MPLS Cross Connect")
    incoming, outgoing = struct.unpack_from("!II", data, 0)
    result = LocalMPLSCrossConnect(incoming_label=incoming, outgoing_label=outgoing)
    if len(data) > 8:
        result.sub_tlvs = unmarshal_local_mpls_cross_connect_subtlvs(data[8:])
    return result