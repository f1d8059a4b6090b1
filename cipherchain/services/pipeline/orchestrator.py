"""
Chain orchestrator - builds a cipher chain and runs it.

1. Optionally normalize the input text
2. Build every requested cipher, failing before any text is transformed
3. Hand the chain to the executor
"""

import logging
import time
from typing import Sequence

from cipherchain.core.config import Settings
from cipherchain.models.schemas import CipherMode, CipherSpec
from cipherchain.services.engines.registry import CipherFactory
from cipherchain.services.pipeline.executor import ChainResult, PipelineExecutor
from cipherchain.services.preprocessing.normalizer import TextNormalizer


class ChainOrchestrator:
    """
    Coordinates cipher construction and chain execution for one run.

    A new set of cipher instances is built for each run and discarded
    afterwards.
    """

    def __init__(
        self,
        factory: CipherFactory | None = None,
        executor: PipelineExecutor | None = None,
        normalizer: TextNormalizer | None = None,
    ):
        self.factory = factory or CipherFactory()
        self.executor = executor or PipelineExecutor()
        self.normalizer = normalizer or TextNormalizer()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChainOrchestrator":
        """Build an orchestrator configured from application settings."""
        return cls(
            factory=CipherFactory(alphabet=settings.alphabet),
            executor=PipelineExecutor(
                worker_count=settings.worker_count,
                worker_timeout=settings.worker_timeout_seconds,
            ),
        )

    def run(
        self,
        specs: Sequence[CipherSpec],
        text: str,
        mode: CipherMode,
        normalize: bool = False,
    ) -> ChainResult:
        """
        Run the full chain.

        Args:
            specs: Requested ciphers and keys, in request order
            text: Input text
            mode: Encrypt or decrypt
            normalize: Pre-filter the text with the normalizer first

        Returns:
            ChainResult with the transformed text

        Raises:
            InvalidKeyError, UnknownCipherError, CipherConstructionError:
                Raised while building the chain, before any transformation
            WorkerTimeoutError: If a chunked stage does not finish in time
        """
        start = time.perf_counter()

        if normalize:
            text = self.normalizer.normalize(text)

        # Build the whole chain before touching the text
        ciphers = self.factory.make_ciphers(specs)

        result = self.executor.run_detailed(ciphers, text, mode)

        self.logger.info(
            "%s with %d cipher(s) [%s] on %d characters in %.3fs",
            mode.value.capitalize(),
            len(ciphers),
            ", ".join(t.value for t in result.cipher_types),
            len(text),
            time.perf_counter() - start,
        )
        return result
