"""Sinfonia Request - remote control client for the Sinfonia sound server."""

__version__ = "0.1.0"
