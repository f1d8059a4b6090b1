from fastapi import APIRouter

from cipherchain.models.schemas import CipherInfo
from cipherchain.services.engines.registry import CipherRegistry

router = APIRouter()


@router.get(
    "",
    response_model=list[CipherInfo],
    summary="List ciphers",
    description="List the ciphers that can be used in a chain and their key formats.",
)
async def list_ciphers() -> list[CipherInfo]:
    """Describe every registered cipher."""
    infos = []
    for cipher_type in CipherRegistry.list_registered():
        cipher_class = CipherRegistry.get_cipher_class(cipher_type)
        infos.append(CipherInfo(
            cipher_type=cipher_type,
            name=cipher_class.name,
            description=cipher_class.description,
            key_format=cipher_class.key_format,
        ))
    return infos
