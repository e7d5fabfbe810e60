"""Encoding and decoding of SSH agent protocol messages and OpenSSH agent extensions."""

__version__ = "0.1.0"