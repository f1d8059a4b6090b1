from __future__ import annotations

import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from cipherchain import __version__
from cipherchain.core.config import get_settings
from cipherchain.core.exceptions import (
    CipherChainError,
    InvalidKeyError,
    UnknownCipherError,
)
from cipherchain.core.logging import configure_logging
from cipherchain.models.schemas import CipherMode, CipherSpec, CipherType
from cipherchain.services.pipeline.orchestrator import ChainOrchestrator

app = typer.Typer(
    help="Encrypts/Decrypts input alphanumeric text using classical ciphers.",
    add_completion=False,
)


def _fail(message: str) -> NoReturn:
    typer.echo(f"[error] {message}", err=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _build_specs(ciphers: List[str], keys: List[str]) -> List[CipherSpec]:
    """Pair each -c with its -k, in the order given."""
    if len(ciphers) != len(keys):
        _fail(
            f"{len(ciphers)} cipher(s) requested but {len(keys)} key(s) supplied; "
            "give one -k per -c"
        )

    specs = []
    for name, key in zip(ciphers, keys):
        try:
            cipher_type = CipherType(name.lower().strip())
        except ValueError:
            available = ", ".join(t.value for t in CipherType)
            _fail(f"Unknown cipher '{name}'. Available: {available}")
        specs.append(CipherSpec(cipher_type=cipher_type, key=key))
    return specs


@app.command()
def main(
    input_file: Optional[Path] = typer.Option(
        None, "--input", "-i", help="Read text to be processed from FILE. Stdin is used if not supplied."
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write processed text to FILE. Stdout is used if not supplied."
    ),
    cipher: Optional[List[str]] = typer.Option(
        None,
        "--cipher",
        "-c",
        help="Cipher to apply: caesar, playfair or vigenere. Repeat to chain: -c caesar -c playfair",
    ),
    key: Optional[List[str]] = typer.Option(
        None, "--key", "-k", help="Key for the matching -c. Repeat once per cipher."
    ),
    decrypt: bool = typer.Option(
        False, "--decrypt/--encrypt", help="Decrypt the input text instead of encrypting it."
    ),
    normalize: bool = typer.Option(
        True,
        "--normalize/--no-normalize",
        help="Uppercase letters, spell out digits and drop everything else before ciphering.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version information."
    ),
):
    """Encrypt or decrypt text with one or more ciphers applied in sequence."""
    settings = get_settings()
    configure_logging(log_level, settings.log_file)

    specs = _build_specs(cipher or [CipherType.CAESAR.value], key or [])
    mode = CipherMode.DECRYPT if decrypt else CipherMode.ENCRYPT

    try:
        text = input_file.read_text(encoding="utf-8") if input_file else sys.stdin.read()
    except OSError as e:
        _fail(f"failed to read input file '{input_file}': {e}")

    orchestrator = ChainOrchestrator.from_settings(settings)
    try:
        result = orchestrator.run(specs, text, mode, normalize=normalize)
    except InvalidKeyError as e:
        _fail(f"Invalid Key: {e.message}")
    except UnknownCipherError as e:
        _fail(e.message)
    except CipherChainError as e:
        _fail(f"problem running requested cipher(s): {e.message}")

    if output_file is not None:
        try:
            output_file.write_text(result.text + "\n", encoding="utf-8")
        except OSError as e:
            _fail(f"failed to write output file '{output_file}': {e}")
    else:
        typer.echo(result.text)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
