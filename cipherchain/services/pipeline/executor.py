"""
Pipeline executor - applies a chain of ciphers to a text buffer.

Encryption applies the ciphers in the order they were requested and
decryption applies them in exactly the reverse order, so that a chain
[A, B, C] is undone by [C, B, A].

Stages whose cipher is chunkable (Caesar) are split into contiguous chunks
transformed on a bounded thread pool and joined back in index order.
All other stages run as a single pass over the whole buffer.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Sequence

from cipherchain.core.exceptions import WorkerTimeoutError
from cipherchain.models.schemas import CipherMode, CipherType
from cipherchain.services.engines.base import Cipher

logger = logging.getLogger(__name__)


@dataclass
class ChainResult:
    """Result of running a cipher chain."""

    text: str
    mode: CipherMode

    # Cipher types in the order they were applied
    cipher_types: list[CipherType] = field(default_factory=list)

    # Number of stages that went through the chunked path
    chunked_stages: int = 0


class PipelineExecutor:
    """
    Runs an ordered list of cipher instances over a text buffer.

    Args:
        worker_count: Number of chunks (and pool threads) for chunkable stages
        worker_timeout: Seconds to wait for all chunks of one stage
    """

    def __init__(self, worker_count: int = 4, worker_timeout: float = 30.0):
        if worker_count < 1:
            raise ValueError("worker_count must be at least 1")
        if worker_timeout <= 0:
            raise ValueError("worker_timeout must be positive")

        self.worker_count = worker_count
        self.worker_timeout = worker_timeout

    @staticmethod
    def order(ciphers: Sequence[Cipher], mode: CipherMode) -> list[Cipher]:
        """Return the ciphers in application order for mode."""
        if mode == CipherMode.DECRYPT:
            return list(reversed(ciphers))
        return list(ciphers)

    def run(self, ciphers: Sequence[Cipher], text: str, mode: CipherMode) -> str:
        """
        Apply every cipher in the chain to text.

        Args:
            ciphers: Cipher instances in request order
            text: Input text buffer
            mode: Encrypt or decrypt

        Returns:
            Fully transformed text
        """
        return self.run_detailed(ciphers, text, mode).text

    def run_detailed(
        self,
        ciphers: Sequence[Cipher],
        text: str,
        mode: CipherMode,
    ) -> ChainResult:
        """Apply the chain and report which stages ran and how."""
        result = ChainResult(text=text, mode=mode)

        for position, cipher in enumerate(self.order(ciphers, mode)):
            if cipher.chunkable:
                result.text = self.apply_chunked(cipher, result.text, mode)
                result.chunked_stages += 1
            else:
                result.text = cipher.apply_cipher(result.text, mode)

            result.cipher_types.append(cipher.cipher_type)
            logger.debug(
                "Stage %d (%s) done, %d characters",
                position,
                cipher.cipher_type.value,
                len(result.text),
            )

        return result

    def apply_chunked(self, cipher: Cipher, text: str, mode: CipherMode) -> str:
        """
        Apply a chunkable cipher on the worker pool.

        Waits once, for at most worker_timeout seconds, for all chunks.
        Queued chunks are cancelled on timeout; running ones are left to
        finish in the background and are never joined.

        Raises:
            WorkerTimeoutError: If any chunk is still running after the wait
        """
        ranges = self.partition(len(text), self.worker_count)
        logger.debug(
            "Splitting %s stage into %d chunks", cipher.cipher_type.value, len(ranges)
        )

        pool = ThreadPoolExecutor(max_workers=self.worker_count)
        try:
            futures = [
                pool.submit(cipher.apply_cipher, text[start:end], mode)
                for start, end in ranges
            ]
            done, not_done = wait(
                futures, timeout=self.worker_timeout, return_when=FIRST_EXCEPTION
            )

            # A failed chunk surfaces its own exception
            for future in done:
                error = future.exception()
                if error is not None:
                    raise error

            if not_done:
                logger.error(
                    "%d of %d chunks unfinished after %.1fs",
                    len(not_done),
                    len(futures),
                    self.worker_timeout,
                )
                raise WorkerTimeoutError(cipher.cipher_type.value, self.worker_timeout)

            return "".join(future.result() for future in futures)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def partition(length: int, parts: int) -> list[tuple[int, int]]:
        """
        Split range(length) into parts contiguous, non-overlapping ranges.

        Every range but the last has length // parts characters; the last one
        also takes the remainder. Ranges may be empty for short text.
        """
        if parts < 1:
            raise ValueError("parts must be at least 1")

        chunk_size = length // parts
        ranges = []
        for i in range(parts):
            start = i * chunk_size
            end = length if i == parts - 1 else (i + 1) * chunk_size
            ranges.append((start, end))
        return ranges
