import string

from cipherchain.core.exceptions import InvalidKeyError
from cipherchain.models.schemas import CipherFamily, CipherMode, CipherType
from cipherchain.services.engines.base import Cipher
from cipherchain.services.engines.registry import CipherRegistry


@CipherRegistry.register
class VigenereCipher(Cipher):
    """
    Vigenère cipher.

    A polyalphabetic substitution cipher that uses a keyword to determine
    the shift for each letter. Each letter of the keyword represents a
    different Caesar shift applied in sequence.

    The key position advances only on characters that are actually shifted;
    characters outside the alphabet pass through and leave it unchanged.
    Because the shift for a character depends on how many alphabet
    characters precede it, the text cannot be split into chunks naively.
    """

    name = "Vigenère Cipher"
    cipher_type = CipherType.VIGENERE
    cipher_family = CipherFamily.POLYALPHABETIC
    description = (
        "A polyalphabetic cipher where each letter is shifted by a different amount "
        "based on a repeating keyword. More secure than Caesar but vulnerable to "
        "Kasiski examination and frequency analysis per key position."
    )
    key_format = "A keyword containing at least one letter, e.g. 'LEMON'"

    def __init__(self, key: str, alphabet: str = string.ascii_uppercase):
        if not alphabet:
            raise ValueError("Alphabet must not be empty")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet must not contain duplicate characters")

        self._alphabet = alphabet
        self._index = {char: idx for idx, char in enumerate(alphabet)}
        self._key = self._parse_key(key)
        self._shifts = tuple(self._index[c] for c in self._key)

    @classmethod
    def from_key(cls, key: str, alphabet: str) -> "VigenereCipher":
        return cls(key, alphabet=alphabet)

    @property
    def key(self) -> str:
        """Normalized keyword."""
        return self._key

    @property
    def shifts(self) -> tuple[int, ...]:
        return self._shifts

    def apply_cipher(self, text: str, mode: CipherMode) -> str:
        """Shift each alphabet character by the next key letter's position."""
        sign = 1 if mode == CipherMode.ENCRYPT else -1
        size = len(self._alphabet)
        period = len(self._shifts)

        result = []
        key_idx = 0

        for char in text:
            idx = self._index.get(char)
            if idx is None:
                result.append(char)
                continue
            shift = self._shifts[key_idx % period]
            result.append(self._alphabet[(idx + sign * shift) % size])
            key_idx += 1

        return "".join(result)

    def _parse_key(self, key: str) -> str:
        """Uppercase the key and keep only alphabet characters."""
        parsed = "".join(c for c in str(key).upper() if c in self._index)
        if not parsed:
            raise InvalidKeyError(
                self.cipher_type.value,
                key,
                "the key must contain at least one alphabetic character",
            )
        return parsed

    def __repr__(self) -> str:
        return f"VigenereCipher(key_length={len(self._key)})"
