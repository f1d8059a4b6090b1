from abc import ABC, abstractmethod
from typing import ClassVar

from cipherchain.models.schemas import CipherFamily, CipherMode, CipherType


class Cipher(ABC):
    """
    Abstract base class for all ciphers.

    A cipher instance is bound to one key, validated by the constructor.
    Constructors raise InvalidKeyError for a bad key, so an instance that
    exists is always usable. Instances hold no state that changes after
    construction.

    Each cipher implementation must provide:
    - apply_cipher(): Transform text in the requested mode
    """

    # Cipher metadata
    name: str
    cipher_type: CipherType
    cipher_family: CipherFamily
    description: str
    key_format: str

    # Whether each character is transformed independently of its neighbours,
    # which makes partitioned concurrent application safe.
    chunkable: ClassVar[bool] = False

    @classmethod
    def from_key(cls, key: str, alphabet: str) -> "Cipher":
        """
        Build an instance from a raw key.

        Ciphers working over a fixed alphabet ignore the alphabet argument.
        """
        return cls(key)

    @abstractmethod
    def apply_cipher(self, text: str, mode: CipherMode) -> str:
        """
        Apply the cipher to text.

        Encrypt and decrypt are exact inverses over the cipher's alphabet.

        Args:
            text: The text to transform
            mode: Encrypt or decrypt

        Returns:
            Transformed text
        """
        pass

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext."""
        return self.apply_cipher(plaintext, CipherMode.ENCRYPT)

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt ciphertext."""
        return self.apply_cipher(ciphertext, CipherMode.DECRYPT)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
