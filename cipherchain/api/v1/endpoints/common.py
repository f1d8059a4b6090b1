from fastapi import HTTPException, status

from cipherchain.core.config import Settings
from cipherchain.core.exceptions import (
    CipherChainError,
    InvalidKeyError,
    UnknownCipherError,
    WorkerTimeoutError,
)
from cipherchain.models.schemas import CipherMode, TransformRequest, TransformResponse
from cipherchain.services.pipeline.orchestrator import ChainOrchestrator


def run_chain(
    request: TransformRequest,
    mode: CipherMode,
    settings: Settings,
) -> TransformResponse:
    """
    Run a request's cipher chain and map failures to HTTP errors.

    No text is returned unless every cipher in the chain was built.
    """
    # Validate text length
    if len(request.text) > settings.max_text_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Text exceeds maximum length of {settings.max_text_length}",
        )

    orchestrator = ChainOrchestrator.from_settings(settings)

    try:
        result = orchestrator.run(
            request.ciphers,
            request.text,
            mode,
            normalize=request.normalize,
        )
    except (InvalidKeyError, UnknownCipherError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except WorkerTimeoutError as e:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=e.message,
        )
    except CipherChainError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cipher chain failed: {e.message}",
        )

    return TransformResponse(
        text=result.text,
        mode=mode,
        ciphers=[spec.cipher_type for spec in request.ciphers],
    )
