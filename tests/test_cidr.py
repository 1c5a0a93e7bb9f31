"""Unit tests for address range matching."""

from botguard.cidr import ip_in_any, ip_in_cidr


class TestIpInCidr:
    def test_ipv4_match(self):
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/24") is True

    def test_ipv4_no_match(self):
        assert ip_in_cidr("192.168.2.5", "192.168.1.0/24") is False

    def test_ipv6_exact(self):
        assert ip_in_cidr("::1", "::1/128") is True
        assert ip_in_cidr("::2", "::1/128") is False

    def test_ipv6_prefix(self):
        assert ip_in_cidr("2001:db8::dead:beef", "2001:db8::/32") is True
        assert ip_in_cidr("2001:db9::1", "2001:db8::/32") is False

    def test_host_bits_in_base_ignored(self):
        assert ip_in_cidr("10.1.2.3", "10.1.200.200/16") is True

    def test_zero_prefix_matches_family(self):
        assert ip_in_cidr("203.0.113.9", "0.0.0.0/0") is True

    def test_family_mismatch(self):
        assert ip_in_cidr("192.168.1.5", "::/0") is False
        assert ip_in_cidr("::1", "0.0.0.0/0") is False

    def test_malformed_input_is_false(self):
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/abc") is False
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/33") is False
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/-1") is False
        assert ip_in_cidr("192.168.1.5", "192.168.1.0") is False
        assert ip_in_cidr("not-an-ip", "192.168.1.0/24") is False
        assert ip_in_cidr("::1", "::1/129") is False
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/²") is False
        assert ip_in_cidr("192.168.1.5", "192.168.1.0/٢٤") is False

    def test_ip_in_any(self):
        ranges = ["52.94.0.0/22", "2600:1f00::/24"]
        assert ip_in_any("52.94.1.7", ranges) is True
        assert ip_in_any("198.51.100.7", ranges) is False
        assert ip_in_any("198.51.100.7", []) is False
