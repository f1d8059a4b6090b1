from typing import Any


class CipherChainError(Exception):
    """Base exception for all cipher chain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CipherChainError):
    """Raised when input validation fails."""

    pass


class InvalidKeyError(ValidationError):
    """Raised when a key fails its cipher's validation rule."""

    def __init__(self, cipher_type: str, key: str, reason: str):
        self.cipher_type = cipher_type
        self.key = key
        self.reason = reason
        super().__init__(
            f"Invalid key for {cipher_type} cipher: {reason}",
            {"cipher_type": cipher_type, "key": key, "reason": reason},
        )


class TextTooLongError(ValidationError):
    """Raised when input text exceeds maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Text length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class CipherError(CipherChainError):
    """Base exception for cipher construction and execution errors."""

    pass


class UnknownCipherError(CipherError):
    """Raised when requested cipher type is not registered."""

    def __init__(self, cipher_name: str):
        super().__init__(
            f"Cipher '{cipher_name}' not found",
            {"cipher_name": cipher_name},
        )


class CipherConstructionError(CipherError):
    """Raised when a cipher cannot be built despite its key passing validation."""

    pass


class WorkerTimeoutError(CipherError):
    """
    Raised when chunk workers for a pipeline stage do not finish in time.

    The stage fails as soon as the wait expires. Workers that were already
    running are not interrupted and finish in the background; their output
    is discarded.
    """

    def __init__(self, stage: str, timeout: float):
        super().__init__(
            f"Workers for stage '{stage}' timed out after {timeout}s",
            {"stage": stage, "timeout": timeout},
        )
