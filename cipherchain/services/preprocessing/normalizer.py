import unicodedata
from dataclasses import dataclass


@dataclass
class NormalizedText:
    """Result of text normalization."""

    text: str
    original: str
    removed_chars: dict[str, int]


class TextNormalizer:
    """
    Normalizes text before it enters a cipher chain.

    Handles:
    - Unicode normalization (NFKC)
    - Case conversion (letters become uppercase)
    - Digits spelled out as English words ("1" -> "ONE")
    - Removal of everything else
    """

    DIGIT_WORDS = {
        "0": "ZERO",
        "1": "ONE",
        "2": "TWO",
        "3": "THREE",
        "4": "FOUR",
        "5": "FIVE",
        "6": "SIX",
        "7": "SEVEN",
        "8": "EIGHT",
        "9": "NINE",
    }

    def normalize(self, text: str) -> str:
        """
        Normalize text for encryption.

        Args:
            text: Input text to normalize

        Returns:
            Normalized text string
        """
        return self.normalize_full(text).text

    def normalize_full(self, text: str) -> NormalizedText:
        """
        Normalize text and return detailed result.

        Args:
            text: Input text to normalize

        Returns:
            NormalizedText with details about the normalization
        """
        original = text
        removed_chars: dict[str, int] = {}

        text = unicodedata.normalize("NFKC", text)

        result = []
        for char in text:
            transformed = self.transform_char(char)
            if transformed:
                result.append(transformed)
            else:
                removed_chars[char] = removed_chars.get(char, 0) + 1

        return NormalizedText(
            text="".join(result),
            original=original,
            removed_chars=removed_chars,
        )

    def transform_char(self, char: str) -> str:
        """Map one input character to its normalized form, or '' to drop it."""
        if char.isascii() and char.isalpha():
            return char.upper()
        return self.DIGIT_WORDS.get(char, "")
