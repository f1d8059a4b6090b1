import re
import string
from typing import ClassVar

from cipherchain.core.exceptions import InvalidKeyError
from cipherchain.models.schemas import CipherFamily, CipherMode, CipherType
from cipherchain.services.engines.base import Cipher
from cipherchain.services.engines.registry import CipherRegistry


@CipherRegistry.register
class CaesarCipher(Cipher):
    """
    Caesar cipher.

    The Caesar cipher is a simple substitution cipher that shifts each letter
    by a fixed amount. Each character is transformed on its own, so the text
    can be split at any point and the pieces processed independently.

    Characters outside the alphabet are passed through unchanged.
    """

    name = "Caesar Cipher"
    cipher_type = CipherType.CAESAR
    cipher_family = CipherFamily.MONOALPHABETIC
    description = (
        "A substitution cipher where each letter is shifted by a fixed amount. "
        "Named after Julius Caesar who used it for military communications."
    )
    key_format = "An integer shift, e.g. '3' or '-5'"

    chunkable: ClassVar[bool] = True

    KEY_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")

    def __init__(self, key: str, alphabet: str = string.ascii_uppercase):
        if not alphabet:
            raise ValueError("Alphabet must not be empty")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet must not contain duplicate characters")

        self._alphabet = alphabet
        self._index = {char: idx for idx, char in enumerate(alphabet)}
        self._shift = self._parse_key(key) % len(alphabet)

    @classmethod
    def from_key(cls, key: str, alphabet: str) -> "CaesarCipher":
        return cls(key, alphabet=alphabet)

    @property
    def shift(self) -> int:
        """Shift reduced modulo the alphabet size."""
        return self._shift

    @property
    def alphabet(self) -> str:
        return self._alphabet

    def apply_cipher(self, text: str, mode: CipherMode) -> str:
        """Shift every alphabet character forwards (encrypt) or back (decrypt)."""
        shift = self._shift if mode == CipherMode.ENCRYPT else -self._shift
        size = len(self._alphabet)

        result = []
        for char in text:
            idx = self._index.get(char)
            if idx is None:
                result.append(char)
            else:
                result.append(self._alphabet[(idx + shift) % size])

        return "".join(result)

    def _parse_key(self, key: str) -> int:
        """Parse key to integer shift value."""
        stripped = str(key).strip()
        if not self.KEY_PATTERN.fullmatch(stripped):
            raise InvalidKeyError(
                self.cipher_type.value,
                key,
                f"the key '{key}' could not be converted to an integer shift",
            )
        return int(stripped)

    def __repr__(self) -> str:
        return f"CaesarCipher(shift={self._shift})"
