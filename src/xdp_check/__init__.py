"""xdp-check - XDP compatibility checker."""

__version__ = "0.1.0"
