import logging
import string
from typing import Iterable, Type

from cipherchain.core.exceptions import CipherConstructionError, UnknownCipherError
from cipherchain.models.schemas import CipherSpec, CipherType
from cipherchain.services.engines.base import Cipher

logger = logging.getLogger(__name__)


class CipherRegistry:
    """
    Registry for cipher classes.

    Maps each cipher type to the class implementing it. Classes, not
    instances, are stored: every chain stage gets its own instance.
    """

    _ciphers: dict[CipherType, Type[Cipher]] = {}

    @classmethod
    def register(cls, cipher_class: Type[Cipher]) -> Type[Cipher]:
        """
        Register a cipher class.

        Can be used as a decorator:
            @CipherRegistry.register
            class CaesarCipher(Cipher):
                ...

        Args:
            cipher_class: The cipher class to register

        Returns:
            The cipher class (for decorator usage)
        """
        cls._ciphers[cipher_class.cipher_type] = cipher_class
        return cipher_class

    @classmethod
    def get_cipher_class(cls, cipher_type: CipherType) -> Type[Cipher] | None:
        """Get the class registered for a cipher type, or None."""
        return cls._ciphers.get(cipher_type)

    @classmethod
    def list_registered(cls) -> list[CipherType]:
        """
        List all registered cipher types.

        Returns:
            List of registered cipher types
        """
        return list(cls._ciphers.keys())

    @classmethod
    def is_registered(cls, cipher_type: CipherType) -> bool:
        """
        Check if a cipher type is registered.

        Args:
            cipher_type: The cipher type to check

        Returns:
            True if registered
        """
        return cipher_type in cls._ciphers


class CipherFactory:
    """
    Builds validated cipher instances.

    Construction is the only place keys are checked. Each call returns a
    new, independent instance; nothing is cached or shared between stages.
    """

    def __init__(self, alphabet: str = string.ascii_uppercase):
        self.alphabet = alphabet

    def make_cipher(self, cipher_type: CipherType | str, key: str) -> Cipher:
        """
        Build a cipher of the given type bound to key.

        Args:
            cipher_type: Cipher type enum or its case-insensitive name
            key: Raw key string

        Returns:
            Constructed cipher instance

        Raises:
            UnknownCipherError: If the cipher type is not supported
            InvalidKeyError: If the key fails the cipher's validation rule
            CipherConstructionError: If no usable instance could be built
        """
        resolved = self._resolve_type(cipher_type)
        cipher_class = CipherRegistry.get_cipher_class(resolved)
        if cipher_class is None:
            raise UnknownCipherError(resolved.value)

        try:
            cipher = cipher_class.from_key(key, alphabet=self.alphabet)
        except ValueError as e:
            raise CipherConstructionError(
                f"Could not construct {resolved.value} cipher: {e}",
                {"cipher_type": resolved.value},
            ) from e

        if not isinstance(cipher, Cipher):
            raise CipherConstructionError(
                f"Problem constructing requested {resolved.value} cipher",
                {"cipher_type": resolved.value},
            )

        logger.debug("Constructed %s cipher", resolved.value)
        return cipher

    def make_ciphers(self, specs: Iterable[CipherSpec]) -> list[Cipher]:
        """
        Build one cipher per spec, in request order.

        Fails on the first bad spec; no partial chain is returned.
        """
        return [self.make_cipher(spec.cipher_type, spec.key) for spec in specs]

    @staticmethod
    def _resolve_type(cipher_type: CipherType | str) -> CipherType:
        """Convert a cipher name to its enum member."""
        if isinstance(cipher_type, CipherType):
            return cipher_type
        try:
            return CipherType(str(cipher_type).lower().strip())
        except ValueError:
            raise UnknownCipherError(str(cipher_type)) from None


# Import ciphers to trigger registration
def _load_ciphers() -> None:
    """Load all cipher modules to trigger registration."""
    from cipherchain.services.engines.monoalphabetic import caesar  # noqa: F401
    from cipherchain.services.engines.polyalphabetic import vigenere  # noqa: F401
    from cipherchain.services.engines.polygraphic import playfair  # noqa: F401


# Load ciphers when module is imported
_load_ciphers()
