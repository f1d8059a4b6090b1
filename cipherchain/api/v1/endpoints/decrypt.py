from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from cipherchain.api.v1.endpoints.common import run_chain
from cipherchain.dependencies import SettingsDep
from cipherchain.models.schemas import (
    CipherMode,
    ErrorResponse,
    TransformRequest,
    TransformResponse,
)

router = APIRouter()


@router.post(
    "",
    response_model=TransformResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or key"},
        500: {"model": ErrorResponse, "description": "Decryption failed"},
        504: {"model": ErrorResponse, "description": "Workers timed out"},
    },
    summary="Decrypt text",
    description=(
        "Decrypt text produced by /encrypt. List the ciphers in the same order "
        "used for encryption; they are undone in reverse."
    ),
)
async def decrypt_text(
    request: TransformRequest,
    settings: SettingsDep,
) -> TransformResponse:
    """
    Decrypt text with a chain of ciphers.

    The chain is given in encryption order and applied back to front.
    """
    return await run_in_threadpool(run_chain, request, CipherMode.DECRYPT, settings)
