"""Exception types.

Only :class:`ProbeError` aborts a run; everything else a probe hits is turned
into a check result.
"""

from __future__ import annotations


class XdpCheckError(Exception):
    """Base class for all xdp-check errors."""


class ProbeError(XdpCheckError):
    """Mandatory host data could not be read; the report would be meaningless."""


class RingParamError(XdpCheckError):
    """The SIOCETHTOOL ring-parameter query did not succeed."""

    def __init__(self, interface: str, reason: str):
        super().__init__(f"ring parameter query on '{interface}' failed: {reason}")
        self.interface = interface
        self.reason = reason
