"""Decoders for BGP-LS and BGP Segment Routing TLVs: SRv6, SR Policy and TE Policy."""

__version__ = "0.1.0"

__all__ = [
    "srv6_tlvs",
    "srv6_service",
    "srpolicy_nlri",
    "srpolicy_subtlv",
    "srpolicy_bsid",
    "srpolicy_segment",
    "srpolicy_tlv",
    "te_policy",
]