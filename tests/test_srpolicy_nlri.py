import ipaddress

import pytest

from srtlv.srpolicy_nlri import NLRI73, unmarshal_ls_nlri73


@pytest.mark.parametrize(
    "data, expect",
    [
        (
            bytes([0x60, 0x00, 0x00, 0x00, 0x02, 0x00, 0x00, 0x00, 0x63, 0x0A, 0x00, 0x00, 0x0D]),
            NLRI73(
                length=12,
                distinguisher=2,
                color=99,
                endpoint=ipaddress.IPv4Address("10.0.0.13").packed,
            ),
        ),
        (
            bytes([0xC0, 0x00, 0x00, 0x00, 0x06, 0x00, 0x00, 0x00, 0x06, 0x20, 0x01, 0x04,
                   0x20, 0xFF, 0xFF, 0x10, 0x13, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
                   0x01]),
            NLRI73(
                length=24,
                distinguisher=6,
                color=6,
                endpoint=ipaddress.IPv6Address("2001:420:ffff:1013::1").packed,
            ),
        ),
    ],
)
def test_unmarshal_ls_nlri73(data, expect):
    assert unmarshal_ls_nlri73(data) == expect


def test_too_short():
    with pytest.raises(ValueError):
        unmarshal_ls_nlri73(bytes(12))


def test_bad_endpoint_length():
    with pytest.raises(ValueError):
        unmarshal_ls_nlri73(bytes(14))