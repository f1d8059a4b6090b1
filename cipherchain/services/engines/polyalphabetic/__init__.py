"""Polyalphabetic ciphers."""

from cipherchain.services.engines.polyalphabetic.vigenere import VigenereCipher

__all__ = [
    "VigenereCipher",
]
