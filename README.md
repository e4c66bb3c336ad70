# srtlv

`srtlv` decodes the binary TLVs found in BGP-LS and BGP Segment Routing
updates into Python dataclasses. It has no runtime dependencies.

## Modules

- `srtlv.srv6_tlvs`: SRv6 BGP-LS TLVs.
  `unmarshal_srv6_endx_sid_tlv`, `unmarshal_sid_structure_tlv`,
  `unmarshal_srv6_subtlv`, `unmarshal_all_srv6_subtlvs`,
  `unmarshal_srv6_capability_tlv`, `unmarshal_srv6_endpoint_behavior_tlv`,
  `unmarshal_srv6_bgp_peer_node_sid_tlv`, plus `endx_sid_tlv_from_json`,
  `sid_structure_from_json` and `subtlvs_from_json`.
- `srtlv.srv6_service`: the SRv6 L3 Service TLV with its SID Information
  Sub-TLVs and SID Structure Sub-Sub-TLVs (`unmarshal_srv6_l3_service`,
  `unmarshal_information_subtlv`, `l3_service_from_json`,
  `information_subtlv_from_json`). `L2Service` carries no fields.
- `srtlv.srpolicy_nlri`: the SR Policy NLRI, SAFI 73 (`unmarshal_ls_nlri73`).
- `srtlv.srpolicy_subtlv`: `Preference`, `Weight` and `ENLP`
  (`unmarshal_preference_stlv`, `weight_from_json`).
- `srtlv.srpolicy_bsid`: the Binding SID Sub-TLV (`unmarshal_bsid_stlv`,
  `BindingSID`, `binding_sid_from_json`). The value length picks the kind:
  2 bytes for no SID, 6 for an MPLS label, 18 for an SRv6 SID.
- `srtlv.srpolicy_segment`: the Segment List Sub-TLV
  (`unmarshal_segment_list_stlv`, `segment_list_from_json`). Only Type A
  segments are decoded; other known segment types are logged and skipped in
  binary input and rejected in JSON input.
- `srtlv.srpolicy_tlv`: the SR Policy Tunnel Encapsulation attribute
  (`unmarshal_sr_policy_tlv`), collecting Preference, Binding SID, ENLP,
  Priority, Path Name and Segment List Sub-TLVs into a `TLV`. Empty input
  returns `None`.
- `srtlv.te_policy`: BGP-LS TE Policy Descriptors
  (`unmarshal_policy_descriptor`), the Policy Candidate Path Descriptor and
  Local MPLS Cross Connect with its FEC and Interface Sub-TLVs.

## Usage

Decode an SR Policy NLRI:

```python
import ipaddress
from srtlv.srpolicy_nlri import unmarshal_ls_nlri73

nlri = unmarshal_ls_nlri73(bytes.fromhex("60000000020000006" "30a00000d"))
print(nlri.length, nlri.distinguisher, nlri.color)   # 12 2 99
print(ipaddress.ip_address(nlri.endpoint))           # 10.0.0.13
```

Decode the SR Policy tunnel encapsulation attribute and walk its segment lists:

```python
from srtlv.srpolicy_tlv import unmarshal_sr_policy_tlv

tlv = unmarshal_sr_policy_tlv(raw_attribute)
for segment_list in tlv.segment_list:
    for segment in segment_list.segments:
        print(segment.label)
print(tlv.to_dict())
```

Decode an SRv6 End.X SID TLV value:

```python
from srtlv.srv6_tlvs import unmarshal_srv6_endx_sid_tlv

endx = unmarshal_srv6_endx_sid_tlv(raw_value)
print(endx.sid, endx.algorithm, endx.to_dict())
```

Inspect a TE Policy descriptor:

```python
from srtlv.te_policy import unmarshal_policy_descriptor

descriptor = unmarshal_policy_descriptor(raw_descriptor)
print(descriptor.all_tlv_ids())
print(descriptor.tunnel_id())                         # None when absent
print(descriptor.policy_candidate_path_descriptor())  # None when absent
```

Malformed input raises `ValueError`. Many classes offer `to_dict()`, giving
the JSON form with the field names used on the wire-facing side (byte values
as base64); `BindingSID.to_json()` gives compact JSON text, and the
`*_from_json` functions build objects back from that form.

## What it does not do

The package only decodes. It does not encode objects back to binary, does not
open or listen on BGP or BMP sessions, does not decode whole BGP or BMP
messages or unicast NLRI, and does not publish or store decoded data anywhere.
It has no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```