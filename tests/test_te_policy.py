import base64
import struct

import pytest

from srtlv.te_policy import (
    LocalMPLSCrossConnectFEC,
    LocalMPLSCrossConnectInterface,
    ProtocolOriginType,
    unmarshal_local_mpls_cross_connect,
    unmarshal_local_mpls_cross_connect_fec,
    unmarshal_local_mpls_cross_connect_interface,
    unmarshal_local_mpls_cross_connect_subtlvs,
    unmarshal_policy_candidate_path_descriptor,
    unmarshal_policy_descriptor,
)


def tlv(kind, value):
    return struct.pack("!HH", kind, len(value)) + value


V4_A = bytes([10, 0, 0, 1])
V4_B = bytes([10, 0, 0, 2])
V6_A = bytes([0x20, 0x01, 0x0D, 0xB8] + [0] * 11 + [1])


def candidate_path(origin, flags, endpoint, color, asn, originator, disc, pad):
    return (
        bytes([origin, flags, 0])
        + endpoint
        + struct.pack("!II", color, asn)
        + originator
        + struct.pack("!I", disc)
        + b"\x00" * pad
    )


def test_policy_descriptor_values():
    data = (
        tlv(550, struct.pack("!H", 7))
        + tlv(551, struct.pack("!H", 3))
        + tlv(552, V4_A)
        + tlv(553, V6_A)
    )
    pd = unmarshal_policy_descriptor(data)
    assert pd.tunnel_id() == 7
    assert pd.lsp_id() == 3
    assert pd.tunnel_head_end_addr() == V4_A
    assert pd.tunnel_tail_end_addr() == V6_A
    assert pd.all_tlv_ids() == [550, 551, 552, 553]
    assert pd.exists(552)
    assert not pd.exists(554)


def test_policy_descriptor_missing_values():
    pd = unmarshal_policy_descriptor(tlv(552, V4_A))
    assert pd.tunnel_id() is None
    assert pd.lsp_id() is None
    assert pd.tunnel_tail_end_addr() is None
    assert pd.policy_candidate_path_descriptor() is None


def test_policy_descriptor_bad_lengths():
    pd = unmarshal_policy_descriptor(tlv(550, b"\x00\x01\x02") + tlv(552, b"\x01\x02\x03"))
    with pytest.raises(ValueError):
        pd.tunnel_id()
    with pytest.raises(ValueError):
        pd.tunnel_head_end_addr()


def test_policy_descriptor_truncated():
    with pytest.raises(ValueError):
        unmarshal_policy_descriptor(struct.pack("!HH", 550, 10) + b"\x00\x01")
    with pytest.raises(ValueError):
        unmarshal_policy_descriptor(b"\x02\x26\x00")


def test_policy_descriptor_duplicate_keeps_first():
    data = tlv(550, struct.pack("!H", 7)) + tlv(550, struct.pack("!H", 9)) + tlv(551, b"\x00\x05")
    pd = unmarshal_policy_descriptor(data)
    assert pd.tunnel_id() == 7
    assert pd.lsp_id() == 5


def test_candidate_path_ipv4():
    raw = candidate_path(2, 0x00, V4_A, 100, 65000, V4_B, 42, 1)
    assert len(raw) == 24
    cp = unmarshal_policy_candidate_path_descriptor(raw)
    assert cp.protocol_origin is ProtocolOriginType.BGP_SR_POLICY
    assert cp.flag_e is False and cp.flag_o is False
    assert cp.endpoint == V4_A
    assert cp.color == 100
    assert cp.originator_asn == 65000
    assert cp.originator_addr == V4_B
    assert cp.discriminator == 42


def test_candidate_path_ipv6_endpoint_through_descriptor():
    raw = candidate_path(1, 0x80, V6_A, 5, 1, V4_B, 8, 1)
    assert len(raw) == 36
    pd = unmarshal_policy_descriptor(tlv(554, raw))
    cp = pd.policy_candidate_path_descriptor()
    assert cp.protocol_origin is ProtocolOriginType.PCEP
    assert cp.flag_e is True
    assert cp.endpoint == V6_A
    assert cp.originator_addr == V4_B
    assert cp.discriminator == 8


def test_candidate_path_both_ipv6():
    raw = candidate_path(3, 0xC0, V6_A, 5, 1, V6_A, 8, 1)
    assert len(raw) == 48
    cp = unmarshal_policy_candidate_path_descriptor(raw)
    assert cp.protocol_origin is ProtocolOriginType.LOCAL
    assert cp.originator_addr == V6_A


def test_candidate_path_errors():
    with pytest.raises(ValueError):
        unmarshal_policy_candidate_path_descriptor(bytes(25))
    with pytest.raises(ValueError):
        unmarshal_policy_candidate_path_descriptor(
            candidate_path(9, 0, V4_A, 1, 1, V4_B, 1, 1)
        )
    # E flag claims an IPv6 endpoint but only 24 bytes are present
    with pytest.raises(ValueError):
        unmarshal_policy_candidate_path_descriptor(bytes([1, 0xC0]) + bytes(22))


def test_fec_ipv4():
    fec = unmarshal_local_mpls_cross_connect_fec(bytes([0x80, 24, 10, 1, 2]))
    assert fec.flag_4 is True
    assert fec.mask_length == 24
    assert fec.prefix == bytes([10, 1, 2, 0])
    assert fec.to_dict() == {
        "4_flag": True,
        "mask_length": 24,
        "prefix": base64.b64encode(bytes([10, 1, 2, 0])).decode("ascii"),
    }


def test_fec_ipv6_padded_to_16():
    fec = unmarshal_local_mpls_cross_connect_fec(bytes([0x00, 32]) + V6_A[:4])
    assert fec.flag_4 is False
    assert len(fec.prefix) == 16
    assert fec.prefix[:4] == V6_A[:4]


def test_fec_bad_length():
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_fec(bytes([0x80, 24, 10, 1]))
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_fec(b"\x80")


def test_interface():
    raw = bytes([0x80]) + struct.pack("!I", 17) + V4_A
    itf = unmarshal_local_mpls_cross_connect_interface(raw)
    assert itf == LocalMPLSCrossConnectInterface(
        flag_i=True, local_interface_id=17, interface_addr=V4_A
    )
    assert itf.to_dict()["local_interface_id"] == 17
    assert itf.to_dict()["i_flag"] is True
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_interface(raw + b"\x00")


def test_cross_connect_with_subtlvs():
    fec = bytes([0x80, 24, 10, 1, 2])
    itf = bytes([0x00]) + struct.pack("!I", 17) + V4_A
    data = struct.pack("!II", 16, 24) + tlv(557, fec) + tlv(556, itf)
    cc = unmarshal_local_mpls_cross_connect(data)
    assert cc.incoming_label == 16
    assert cc.outgoing_label == 24
    assert set(cc.sub_tlvs) == {556, 557}
    assert isinstance(cc.sub_tlvs[557], LocalMPLSCrossConnectFEC)
    assert cc.sub_tlvs[557].mask_length == 24
    assert cc.sub_tlvs[556].interface_addr == V4_A


def test_cross_connect_labels_only():
    cc = unmarshal_local_mpls_cross_connect(struct.pack("!II", 16, 24))
    assert (cc.incoming_label, cc.outgoing_label) == (16, 24)
    assert cc.sub_tlvs == {}


def test_cross_connect_errors():
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect(bytes(7))
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_subtlvs(tlv(600, b"\x00"))
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_subtlvs(struct.pack("!HH", 557, 9) + b"\x80")
    with pytest.raises(ValueError):
        unmarshal_local_mpls_cross_connect_subtlvs(b"\x02\x2d")