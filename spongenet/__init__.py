"""Byte buffers, packet formats, sockets, an event loop and segment adapters for a user-space TCP stack."""

__version__ = "0.1.0"