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
        500: {"model": ErrorResponse, "description": "Encryption failed"},
        504: {"model": ErrorResponse, "description": "Workers timed out"},
    },
    summary="Encrypt text",
    description="Encrypt text with one or more ciphers applied in the order given.",
)
async def encrypt_text(
    request: TransformRequest,
    settings: SettingsDep,
) -> TransformResponse:
    """
    Encrypt text with a chain of ciphers.

    Ciphers are applied in the order listed in the request. The chain runs
    in the threadpool since chunked stages block until their workers finish.
    """
    return await run_in_threadpool(run_chain, request, CipherMode.ENCRYPT, settings)
