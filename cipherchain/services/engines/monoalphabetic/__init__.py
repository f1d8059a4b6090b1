"""Monoalphabetic ciphers."""

from cipherchain.services.engines.monoalphabetic.caesar import CaesarCipher

__all__ = [
    "CaesarCipher",
]
