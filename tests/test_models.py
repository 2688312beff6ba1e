import pytest

from connscan.models import PortRange, PortStatus, ScanConfig, ScanMode, ScanResult, ScanSummary


def test_port_range_len():
    assert len(PortRange(1, 1023)) == 1023
    assert len(PortRange(80, 80)) == 1


@pytest.mark.parametrize("start,end", [(0, 10), (1, 65536), (100, 99), (-1, 5)])
def test_port_range_rejects_bad_bounds(start, end):
    with pytest.raises(ValueError):
        PortRange(start, end)


def test_port_range_is_immutable():
    r = PortRange(1, 2)
    with pytest.raises(AttributeError):
        r.start = 5


def test_scan_config_defaults():
    cfg = ScanConfig("127.0.0.1")
    assert cfg.mode is ScanMode.FULL
    assert cfg.timeout_ms == 200
    assert cfg.timeout_s == pytest.approx(0.2)
    assert cfg.reads_banner
    assert not ScanConfig("127.0.0.1", ScanMode.FAST).reads_banner


@pytest.mark.parametrize("target", ["localhost", "::1", "256.1.1.1", ""])
def test_scan_config_requires_ipv4(target):
    with pytest.raises(ValueError):
        ScanConfig(target)


def test_scan_config_requires_positive_timeout():
    with pytest.raises(ValueError):
        ScanConfig("127.0.0.1", timeout_ms=0)


def test_result_is_open():
    assert ScanResult(0, 22, PortStatus.OPEN).is_open
    assert not ScanResult(0, 22, PortStatus.CLOSED_OR_FILTERED).is_open


def test_summary_rate():
    assert ScanSummary(100, 2, 2.0).ports_per_second == 50.0
    assert ScanSummary(100, 2, 0.0).ports_per_second == 0.0


def test_scan_config_accepts_mode_names():
    assert ScanConfig("127.0.0.1", mode="full").mode is ScanMode.FULL
    assert ScanConfig("127.0.0.1", mode="fast").reads_banner is False


def test_scan_config_rejects_unknown_mode():
    with pytest.raises(ValueError):
        ScanConfig("127.0.0.1", mode="stealth")
