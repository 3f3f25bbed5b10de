"""SIOCETHTOOL ring-parameter query.

Mirrors the kernel ABI from linux/ethtool.h and linux/if.h:

    struct ethtool_ringparam { __u32 cmd; __u32 rx_max_pending; ... __u32 tx_pending; };
    struct ifreq { char ifr_name[IFNAMSIZ]; union { ...; void *ifru_data; } ifr_ifru; };

The request passes a pointer to the ringparam record inside the ifreq; the
kernel fills the record in place.
"""

from __future__ import annotations

import ctypes
import fcntl
import logging
import socket
from dataclasses import dataclass

from xdp_check.errors import RingParamError

logger = logging.getLogger(__name__)

SIOCETHTOOL = 0x8946
ETHTOOL_GRINGPARAM = 0x00000010
IFNAMSIZ = 16


class EthtoolRingParam(ctypes.Structure):
    _fields_ = [
        ("cmd", ctypes.c_uint32),
        ("rx_max_pending", ctypes.c_uint32),
        ("rx_mini_max_pending", ctypes.c_uint32),
        ("rx_jumbo_max_pending", ctypes.c_uint32),
        ("tx_max_pending", ctypes.c_uint32),
        ("rx_pending", ctypes.c_uint32),
        ("rx_mini_pending", ctypes.c_uint32),
        ("rx_jumbo_pending", ctypes.c_uint32),
        ("tx_pending", ctypes.c_uint32),
    ]


class _IfMap(ctypes.Structure):
    _fields_ = [
        ("mem_start", ctypes.c_ulong),
        ("mem_end", ctypes.c_ulong),
        ("base_addr", ctypes.c_ushort),
        ("irq", ctypes.c_ubyte),
        ("dma", ctypes.c_ubyte),
        ("port", ctypes.c_ubyte),
    ]


class _IfrIfru(ctypes.Union):
    # ifmap is the largest member and sets the union size (24 bytes on LP64)
    _fields_ = [
        ("ifru_addr", ctypes.c_ubyte * 16),
        ("ifru_map", _IfMap),
        ("ifru_data", ctypes.c_void_p),
    ]


class IfReq(ctypes.Structure):
    _fields_ = [
        ("ifr_name", ctypes.c_char * IFNAMSIZ),
        ("ifr_ifru", _IfrIfru),
    ]


@dataclass(frozen=True)
class RingParameters:
    rx_pending: int
    tx_pending: int
    rx_max_pending: int
    tx_max_pending: int

    @property
    def current(self) -> tuple[int, int]:
        return (self.rx_pending, self.tx_pending)


def _encode_ifname(interface: str) -> bytes:
    """Truncate to IFNAMSIZ - 1 bytes so the name stays NUL-terminated."""
    return interface.encode("utf-8", errors="replace")[: IFNAMSIZ - 1]


def build_request(interface: str) -> tuple[IfReq, EthtoolRingParam]:
    """Build a zeroed ifreq pointing at a zeroed ETHTOOL_GRINGPARAM record.

    The caller must keep the returned ringparam alive while the ifreq is in use.
    """
    ring = EthtoolRingParam()
    ctypes.memset(ctypes.addressof(ring), 0, ctypes.sizeof(ring))
    ring.cmd = ETHTOOL_GRINGPARAM

    ifr = IfReq()
    ctypes.memset(ctypes.addressof(ifr), 0, ctypes.sizeof(ifr))
    ifr.ifr_name = _encode_ifname(interface)
    ifr.ifr_ifru.ifru_data = ctypes.addressof(ring)
    return ifr, ring


def query_ring_parameters(interface: str) -> RingParameters:
    """Return the RX/TX ring sizes of ``interface``.

    Raises RingParamError if the socket cannot be created or the ioctl fails.
    The socket is closed on every path.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise RingParamError(interface, f"cannot create socket: {e.strerror or e}") from e

    with sock:
        ifr, ring = build_request(interface)
        try:
            fcntl.ioctl(sock.fileno(), SIOCETHTOOL, ifr)
        except OSError as e:
            logger.debug("SIOCETHTOOL on %s failed", interface, exc_info=True)
            raise RingParamError(interface, e.strerror or str(e)) from e

    return RingParameters(
        rx_pending=ring.rx_pending,
        tx_pending=ring.tx_pending,
        rx_max_pending=ring.rx_max_pending,
        tx_max_pending=ring.tx_max_pending,
    )
