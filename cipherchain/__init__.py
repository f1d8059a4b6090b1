"""Classical cipher chains: Caesar, Playfair and Vigenère applied in sequence."""

__version__ = "0.5.0"
