from typing import ClassVar

from cipherchain.core.exceptions import InvalidKeyError
from cipherchain.models.schemas import CipherFamily, CipherMode, CipherType
from cipherchain.services.engines.base import Cipher
from cipherchain.services.engines.registry import CipherRegistry


@CipherRegistry.register
class PlayfairCipher(Cipher):
    """
    Playfair cipher.

    The Playfair cipher encrypts digraphs (pairs of letters) using a 5x5 key square.
    The alphabet is reduced to 25 letters (I and J are combined).

    Rules for encryption:
    1. Same row: replace each letter with the one to its right
    2. Same column: replace each letter with the one below
    3. Rectangle: swap corners horizontally

    Before encryption, a pair made of the same letter is split by an 'X'
    ('Q' if the letter is itself 'X'), e.g. "BALLOON" -> "BA LX LO ON".
    Odd-length text is padded with 'Z' ('X' if the last letter is 'Z').
    Decryption leaves these fillers in place.

    Input is uppercased, J becomes I, and anything that is not a letter
    is dropped, since it cannot be placed in the square.
    """

    name = "Playfair Cipher"
    cipher_type = CipherType.PLAYFAIR
    cipher_family = CipherFamily.POLYGRAPHIC
    description = (
        "A digraph substitution cipher using a 5x5 key square. "
        "Pairs of letters are encrypted together based on their positions "
        "in the square. I and J are treated as the same letter."
    )
    key_format = "A keyword containing at least one letter, e.g. 'PLAYFAIR'"

    ALPHABET: ClassVar[str] = "ABCDEFGHIKLMNOPQRSTUVWXYZ"  # 25 letters, I=J
    SIZE: ClassVar[int] = 5

    def __init__(self, key: str):
        keyword = self._parse_key(key)
        self._square = self._build_key_square(keyword)
        self._positions = {
            char: (row, col)
            for row, letters in enumerate(self._square)
            for col, char in enumerate(letters)
        }

    @property
    def square(self) -> tuple[tuple[str, ...], ...]:
        """The 5x5 key square, row by row."""
        return self._square

    def apply_cipher(self, text: str, mode: CipherMode) -> str:
        """Substitute the text digraph by digraph."""
        letters = self._clean(text)

        if mode == CipherMode.ENCRYPT:
            letters = self._insert_fillers(letters)
            step = 1
        else:
            step = -1

        self._pad(letters)

        result = []
        for i in range(0, len(letters), 2):
            result.extend(self._substitute(letters[i], letters[i + 1], step))

        return "".join(result)

    def _parse_key(self, key: str) -> str:
        """Uppercase key, merge J into I and drop non-letters."""
        keyword = "".join(self._clean(str(key)))
        if not keyword:
            raise InvalidKeyError(
                self.cipher_type.value,
                key,
                "the key must contain at least one alphabetic character",
            )
        return keyword

    def _build_key_square(self, keyword: str) -> tuple[tuple[str, ...], ...]:
        """Build the 5x5 key square from a keyword."""
        # Remove duplicates while preserving order
        seen = set()
        key_letters = []
        for char in keyword + self.ALPHABET:
            if char not in seen:
                seen.add(char)
                key_letters.append(char)

        return tuple(
            tuple(key_letters[i * self.SIZE:(i + 1) * self.SIZE])
            for i in range(self.SIZE)
        )

    def _clean(self, text: str) -> list[str]:
        """Uppercase, replace J with I and keep only square letters."""
        text = text.upper().replace("J", "I")
        return [c for c in text if c in self.ALPHABET]

    @staticmethod
    def _insert_fillers(letters: list[str]) -> list[str]:
        """Split every digraph made of a repeated letter."""
        letters = list(letters)
        i = 0
        while i + 1 < len(letters):
            if letters[i] == letters[i + 1]:
                letters.insert(i + 1, "Q" if letters[i] == "X" else "X")
            i += 2
        return letters

    @staticmethod
    def _pad(letters: list[str]) -> None:
        """Make the length even."""
        if len(letters) % 2 != 0:
            letters.append("X" if letters[-1] == "Z" else "Z")

    def _substitute(self, a: str, b: str, step: int) -> tuple[str, str]:
        """Apply the row/column/rectangle rules to one digraph."""
        row_a, col_a = self._positions[a]
        row_b, col_b = self._positions[b]
        size = self.SIZE

        if row_a == row_b:
            # Same row: shift right (encrypt) or left (decrypt)
            return (
                self._square[row_a][(col_a + step) % size],
                self._square[row_b][(col_b + step) % size],
            )
        if col_a == col_b:
            # Same column: shift down (encrypt) or up (decrypt)
            return (
                self._square[(row_a + step) % size][col_a],
                self._square[(row_b + step) % size][col_b],
            )
        # Rectangle: swap columns
        return self._square[row_a][col_b], self._square[row_b][col_a]

    def __repr__(self) -> str:
        return "PlayfairCipher()"
