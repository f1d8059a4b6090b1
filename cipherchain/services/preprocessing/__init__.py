"""Input text preprocessing."""

from cipherchain.services.preprocessing.normalizer import NormalizedText, TextNormalizer

__all__ = [
    "NormalizedText",
    "TextNormalizer",
]
