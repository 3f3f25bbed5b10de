"""Tests for the SIOCETHTOOL ring-parameter primitive."""

from __future__ import annotations

import ctypes
import socket
import sys

import pytest

from xdp_check.core import ethtool
from xdp_check.errors import RingParamError


def test_ringparam_layout_matches_kernel_abi():
    assert ctypes.sizeof(ethtool.EthtoolRingParam) == 9 * 4
    offsets = [getattr(ethtool.EthtoolRingParam, name).offset for name, _ in ethtool.EthtoolRingParam._fields_]
    assert offsets == [i * 4 for i in range(9)]


@pytest.mark.skipif(ctypes.sizeof(ctypes.c_void_p) != 8, reason="LP64 layout")
def test_ifreq_layout_lp64():
    assert ctypes.sizeof(ethtool.IfReq) == 40
    assert ethtool.IfReq.ifr_ifru.offset == ethtool.IFNAMSIZ


def test_build_request_zeroed_and_linked():
    ifr, ring = ethtool.build_request("eth0")

    assert ring.cmd == ethtool.ETHTOOL_GRINGPARAM
    assert (ring.rx_pending, ring.tx_pending, ring.rx_max_pending, ring.tx_max_pending) == (0, 0, 0, 0)
    assert ifr.ifr_name == b"eth0"
    assert bytes(ifr)[4:ethtool.IFNAMSIZ] == b"\x00" * (ethtool.IFNAMSIZ - 4)
    assert ifr.ifr_ifru.ifru_data == ctypes.addressof(ring)


def test_long_interface_name_is_truncated_and_terminated():
    ifr, _ = ethtool.build_request("a" * 40)
    raw = bytes(ifr)[: ethtool.IFNAMSIZ]
    assert raw == b"a" * (ethtool.IFNAMSIZ - 1) + b"\x00"


def test_socket_failure_is_ring_param_error(monkeypatch):
    def broken_socket(*args, **kwargs):
        raise OSError(24, "Too many open files")

    monkeypatch.setattr(ethtool.socket, "socket", broken_socket)
    with pytest.raises(RingParamError) as excinfo:
        ethtool.query_ring_parameters("eth0")
    assert excinfo.value.interface == "eth0"


def test_ioctl_failure_closes_socket(monkeypatch):
    opened = []
    real_socket = socket.socket

    def tracking_socket(*args, **kwargs):
        sock = real_socket(*args, **kwargs)
        opened.append(sock)
        return sock

    def failing_ioctl(fd, request, arg):
        assert request == ethtool.SIOCETHTOOL
        raise OSError(19, "No such device")

    monkeypatch.setattr(ethtool.socket, "socket", tracking_socket)
    monkeypatch.setattr(ethtool.fcntl, "ioctl", failing_ioctl)

    with pytest.raises(RingParamError, match="No such device"):
        ethtool.query_ring_parameters("eth0")
    assert opened and opened[0].fileno() == -1


def test_successful_ioctl_returns_populated_record(monkeypatch):
    def fake_ioctl(fd, request, ifr):
        ring = ethtool.EthtoolRingParam.from_address(ifr.ifr_ifru.ifru_data)
        assert ring.cmd == ethtool.ETHTOOL_GRINGPARAM
        ring.rx_max_pending, ring.tx_max_pending = 4096, 4096
        ring.rx_pending, ring.tx_pending = 1024, 512
        return 0

    monkeypatch.setattr(ethtool.fcntl, "ioctl", fake_ioctl)
    params = ethtool.query_ring_parameters("eth0")
    assert params == ethtool.RingParameters(1024, 512, 4096, 4096)
    assert params.current == (1024, 512)


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="SIOCETHTOOL is Linux-only")
def test_nonexistent_interface_yields_error_not_partial_record():
    try:
        params = ethtool.query_ring_parameters("xdpchk-none0")
    except RingParamError:
        return
    pytest.fail(f"expected RingParamError, got {params!r}")
