"""Cipher implementations and the factory that builds them."""

from cipherchain.services.engines.base import Cipher
from cipherchain.services.engines.registry import CipherFactory, CipherRegistry

__all__ = [
    "Cipher",
    "CipherFactory",
    "CipherRegistry",
]
