"""Polygraphic ciphers."""

from cipherchain.services.engines.polygraphic.playfair import PlayfairCipher

__all__ = [
    "PlayfairCipher",
]
