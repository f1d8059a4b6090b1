from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================


class CipherFamily(str, Enum):
    """Supported cipher families."""

    MONOALPHABETIC = "monoalphabetic"
    POLYALPHABETIC = "polyalphabetic"
    POLYGRAPHIC = "polygraphic"


class CipherType(str, Enum):
    """Specific cipher types."""

    CAESAR = "caesar"
    PLAYFAIR = "playfair"
    VIGENERE = "vigenere"


class CipherMode(str, Enum):
    """Direction of a cipher transformation."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


# ============================================================================
# Chain Schemas
# ============================================================================


class CipherSpec(BaseModel):
    """One requested stage of a cipher chain."""

    cipher_type: CipherType
    key: str


class CipherInfo(BaseModel):
    """Description of a registered cipher."""

    cipher_type: CipherType
    name: str
    description: str
    key_format: str


# ============================================================================
# Request Schemas
# ============================================================================


class TransformRequest(BaseModel):
    """Request schema for /encrypt and /decrypt endpoints."""

    text: str = Field(min_length=1)
    ciphers: list[CipherSpec] = Field(min_length=1)
    normalize: bool = True


# ============================================================================
# Response Schemas
# ============================================================================


class TransformResponse(BaseModel):
    """Response schema for /encrypt and /decrypt endpoints."""

    text: str
    mode: CipherMode
    ciphers: list[CipherType]


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
