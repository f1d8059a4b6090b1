"""
Tests for the pipeline executor and chain orchestrator.
"""
import threading

import pytest

from cipherchain.core.config import Settings
from cipherchain.core.exceptions import InvalidKeyError, WorkerTimeoutError
from cipherchain.models.schemas import (
    CipherFamily,
    CipherMode,
    CipherSpec,
    CipherType,
)
from cipherchain.services.engines.base import Cipher
from cipherchain.services.engines.monoalphabetic.caesar import CaesarCipher
from cipherchain.services.engines.polyalphabetic.vigenere import VigenereCipher
from cipherchain.services.engines.polygraphic.playfair import PlayfairCipher
from cipherchain.services.engines.registry import CipherFactory
from cipherchain.services.pipeline.executor import PipelineExecutor
from cipherchain.services.pipeline.orchestrator import ChainOrchestrator


class RecordingCipher(Cipher):
    """Appends its label to the text and records when it ran."""

    name = "Recording"
    cipher_type = CipherType.VIGENERE
    cipher_family = CipherFamily.POLYALPHABETIC
    description = "Test double"
    key_format = ""

    def __init__(self, label, calls):
        self.label = label
        self.calls = calls

    def apply_cipher(self, text, mode):
        self.calls.append((self.label, mode))
        return text + self.label


class BlockingCipher(Cipher):
    """Chunkable cipher whose workers wait until released."""

    name = "Blocking"
    cipher_type = CipherType.CAESAR
    cipher_family = CipherFamily.MONOALPHABETIC
    description = "Test double"
    key_format = ""
    chunkable = True

    def __init__(self):
        self.release = threading.Event()
        self.finished = threading.Event()

    def apply_cipher(self, text, mode):
        self.release.wait(timeout=5)
        self.finished.set()
        return text


class FailingCipher(Cipher):
    """Chunkable cipher whose workers raise."""

    name = "Failing"
    cipher_type = CipherType.CAESAR
    cipher_family = CipherFamily.MONOALPHABETIC
    description = "Test double"
    key_format = ""
    chunkable = True

    def apply_cipher(self, text, mode):
        raise RuntimeError("chunk failed")


class TestPipelineOrdering:
    """Test chain ordering for each mode."""

    @pytest.fixture
    def executor(self):
        return PipelineExecutor()

    def test_encrypt_applies_in_request_order(self, executor):
        """Encryption applies ciphers first to last."""
        calls = []
        chain = [RecordingCipher(label, calls) for label in "ABC"]

        output = executor.run(chain, "", CipherMode.ENCRYPT)

        assert output == "ABC"
        assert [label for label, _ in calls] == ["A", "B", "C"]

    def test_decrypt_applies_in_reverse_order(self, executor):
        """Decryption applies ciphers last to first."""
        calls = []
        chain = [RecordingCipher(label, calls) for label in "ABC"]

        output = executor.run(chain, "", CipherMode.DECRYPT)

        assert output == "CBA"
        assert [label for label, _ in calls] == ["C", "B", "A"]
        assert all(mode == CipherMode.DECRYPT for _, mode in calls)

    def test_order_does_not_modify_input(self, executor):
        """Reversing for decryption leaves the caller's list alone."""
        calls = []
        chain = [RecordingCipher(label, calls) for label in "AB"]

        ordered = executor.order(chain, CipherMode.DECRYPT)

        assert ordered == [chain[1], chain[0]]
        assert [c.label for c in chain] == ["A", "B"]

    def test_empty_chain_returns_text(self, executor):
        assert executor.run([], "HELLO", CipherMode.ENCRYPT) == "HELLO"


class TestChainRoundTrip:
    """Multi-cipher encrypt/decrypt behaviour."""

    @pytest.fixture
    def executor(self):
        return PipelineExecutor(worker_count=4)

    def test_caesar_vigenere_roundtrip(self, executor):
        """Caesar then Vigenère is undone by the reversed chain."""
        chain = [CaesarCipher("7"), VigenereCipher("KEY")]
        plaintext = "HELLOHELLOWORLD"

        encrypted = executor.run(chain, plaintext, CipherMode.ENCRYPT)

        assert encrypted != plaintext
        assert executor.run(chain, encrypted, CipherMode.DECRYPT) == plaintext

    def test_caesar_playfair_roundtrip(self, executor):
        """A chain mixing Caesar and Playfair roundtrips in reverse order."""
        chain = [CaesarCipher("3"), PlayfairCipher("PLAYFAIR")]
        plaintext = "ATTACKATDAWN"

        encrypted = executor.run(chain, plaintext, CipherMode.ENCRYPT)

        assert executor.run(chain, encrypted, CipherMode.DECRYPT) == plaintext

    def test_forward_order_decryption_fails(self, executor):
        """Undoing the chain in request order does not recover the text."""
        chain = [CaesarCipher("3"), PlayfairCipher("PLAYFAIR")]
        plaintext = "ATTACKATDAWN"

        encrypted = executor.run(chain, plaintext, CipherMode.ENCRYPT)

        # Decrypt stage by stage, but in the wrong order
        wrong = encrypted
        for cipher in chain:
            wrong = cipher.apply_cipher(wrong, CipherMode.DECRYPT)

        assert wrong != plaintext

    def test_three_cipher_roundtrip(self, executor):
        """All three kinds together roundtrip."""
        chain = [VigenereCipher("LEMON"), CaesarCipher("11"), PlayfairCipher("MONARCHY")]
        # The Playfair input here has no J and no repeated-letter digraphs
        plaintext = "ATTACKATDAWN"

        encrypted = executor.run(chain, plaintext, CipherMode.ENCRYPT)
        intermediate = CaesarCipher("11").encrypt(VigenereCipher("LEMON").encrypt(plaintext))

        assert PlayfairCipher("MONARCHY").decrypt(encrypted) == intermediate
        assert executor.run(chain, encrypted, CipherMode.DECRYPT) == plaintext

    def test_duplicate_caesar_stages_add_up(self, executor):
        """Two Caesar stages compose into one larger shift."""
        chain = [CaesarCipher("3"), CaesarCipher("5")]
        assert executor.run(chain, "HELLO", CipherMode.ENCRYPT) == CaesarCipher("8").encrypt("HELLO")

    def test_run_detailed_reports_stages(self, executor):
        """The result lists stages in application order and counts chunked ones."""
        chain = [CaesarCipher("1"), VigenereCipher("KEY")]

        result = executor.run_detailed(chain, "HELLO", CipherMode.DECRYPT)

        assert result.mode == CipherMode.DECRYPT
        assert result.cipher_types == [CipherType.VIGENERE, CipherType.CAESAR]
        assert result.chunked_stages == 1


class TestChunkedExecution:
    """Test the concurrent Caesar path."""

    @pytest.mark.parametrize("length", [0, 1, 3, 4, 5, 17, 100, 1001])
    @pytest.mark.parametrize("workers", [1, 2, 3, 4, 7])
    def test_chunked_matches_sequential(self, length, workers):
        """Chunked output equals the single-pass output byte for byte."""
        text = ("THEQUICKBROWNFOXJUMPSOVERTHELAZYDOG" * 30)[:length]
        cipher = CaesarCipher("13")
        executor = PipelineExecutor(worker_count=workers)

        for mode in CipherMode:
            assert executor.apply_chunked(cipher, text, mode) == cipher.apply_cipher(text, mode)

    @pytest.mark.parametrize("length", [0, 1, 5, 10, 11])
    @pytest.mark.parametrize("parts", [1, 2, 4, 6])
    def test_partition_covers_text(self, length, parts):
        """Ranges are contiguous, non-overlapping and cover the whole text."""
        ranges = PipelineExecutor.partition(length, parts)

        assert len(ranges) == parts
        assert ranges[0][0] == 0
        assert ranges[-1][1] == length
        for (_, end), (start, _) in zip(ranges, ranges[1:]):
            assert end == start

    def test_partition_last_chunk_takes_remainder(self):
        assert PipelineExecutor.partition(10, 4) == [(0, 2), (2, 4), (4, 6), (6, 10)]

    def test_only_chunkable_stages_are_chunked(self, monkeypatch):
        """Playfair and Vigenère stages never go through the pool."""
        executor = PipelineExecutor()
        chunked = []
        original = executor.apply_chunked

        def spy(cipher, text, mode):
            chunked.append(cipher.cipher_type)
            return original(cipher, text, mode)

        monkeypatch.setattr(executor, "apply_chunked", spy)

        chain = [VigenereCipher("KEY"), CaesarCipher("2"), PlayfairCipher("KEY")]
        executor.run(chain, "ATTACKATDAWN", CipherMode.ENCRYPT)

        assert chunked == [CipherType.CAESAR]

    def test_timeout_raises(self):
        """Workers that do not finish in time fail the stage."""
        cipher = BlockingCipher()
        executor = PipelineExecutor(worker_count=2, worker_timeout=0.05)

        try:
            with pytest.raises(WorkerTimeoutError) as exc_info:
                executor.apply_chunked(cipher, "ABCDEF", CipherMode.ENCRYPT)
        finally:
            cipher.release.set()

        assert exc_info.value.details["timeout"] == 0.05

    def test_timed_out_workers_finish_in_background(self):
        """The stage fails at once; abandoned workers still run to completion."""
        cipher = BlockingCipher()
        executor = PipelineExecutor(worker_count=2, worker_timeout=0.05)

        with pytest.raises(WorkerTimeoutError):
            executor.apply_chunked(cipher, "ABCDEF", CipherMode.ENCRYPT)

        assert not cipher.finished.is_set()
        cipher.release.set()
        assert cipher.finished.wait(timeout=2)

    def test_worker_exception_propagates(self):
        """An error inside a chunk worker reaches the caller."""
        executor = PipelineExecutor(worker_count=3)

        with pytest.raises(RuntimeError, match="chunk failed"):
            executor.apply_chunked(FailingCipher(), "ABCDEF", CipherMode.ENCRYPT)

    @pytest.mark.parametrize("kwargs", [{"worker_count": 0}, {"worker_timeout": 0}])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            PipelineExecutor(**kwargs)


class TestChainOrchestrator:
    """Test building and running a chain in one call."""

    @pytest.fixture
    def orchestrator(self):
        return ChainOrchestrator()

    def test_run_encrypt_and_decrypt(self, orchestrator):
        specs = [
            CipherSpec(cipher_type=CipherType.CAESAR, key="4"),
            CipherSpec(cipher_type=CipherType.VIGENERE, key="LEMON"),
        ]

        encrypted = orchestrator.run(specs, "ATTACKATDAWN", CipherMode.ENCRYPT)
        decrypted = orchestrator.run(specs, encrypted.text, CipherMode.DECRYPT)

        assert decrypted.text == "ATTACKATDAWN"

    def test_normalize_before_ciphering(self, orchestrator):
        """Normalization uppercases, spells digits and drops the rest."""
        specs = [CipherSpec(cipher_type=CipherType.CAESAR, key="0")]

        result = orchestrator.run(specs, "Hello, World 1!", CipherMode.ENCRYPT, normalize=True)

        assert result.text == "HELLOWORLDONE"

    def test_invalid_key_stops_before_execution(self):
        """No stage runs when any key in the chain is invalid."""

        class SpyExecutor(PipelineExecutor):
            ran = False

            def run_detailed(self, ciphers, text, mode):
                SpyExecutor.ran = True
                return super().run_detailed(ciphers, text, mode)

        orchestrator = ChainOrchestrator(executor=SpyExecutor())
        specs = [
            CipherSpec(cipher_type=CipherType.CAESAR, key="4"),
            CipherSpec(cipher_type=CipherType.PLAYFAIR, key=""),
        ]

        with pytest.raises(InvalidKeyError):
            orchestrator.run(specs, "HELLO", CipherMode.ENCRYPT)

        assert SpyExecutor.ran is False

    def test_from_settings(self):
        """Settings control worker count, timeout and alphabet."""
        settings = Settings(worker_count=3, worker_timeout_seconds=2.5, alphabet="ABC")

        orchestrator = ChainOrchestrator.from_settings(settings)

        assert orchestrator.executor.worker_count == 3
        assert orchestrator.executor.worker_timeout == 2.5
        assert orchestrator.factory.alphabet == "ABC"

    def test_fresh_instances_per_run(self):
        """Each run builds its own ciphers."""
        built = []

        class CountingFactory(CipherFactory):
            def make_cipher(self, cipher_type, key):
                cipher = super().make_cipher(cipher_type, key)
                built.append(cipher)
                return cipher

        orchestrator = ChainOrchestrator(factory=CountingFactory())
        specs = [CipherSpec(cipher_type=CipherType.CAESAR, key="1")]

        orchestrator.run(specs, "A", CipherMode.ENCRYPT)
        orchestrator.run(specs, "A", CipherMode.ENCRYPT)

        assert len(built) == 2
        assert built[0] is not built[1]
