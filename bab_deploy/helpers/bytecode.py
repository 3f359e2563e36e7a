"""
Runtime bytecode comparison.

Compares on-chain code with compiler output the way explorers do before
accepting a source: immutable slots are filled at deployment time, so they are
blanked on both sides, and the trailing CBOR metadata is ignored.
"""
from __future__ import annotations

from bab_deploy.errors import ConfigurationError

LIBRARY_PLACEHOLDER = "__$"


def to_bytes(code) -> bytes:
    """Decode hex code (``0x`` optional).

    Raises:
        ConfigurationError: If the code is not hex, e.g. compiler output that
            still has unlinked ``__$...$__`` library placeholders.
    """
    if isinstance(code, (bytes, bytearray)):
        return bytes(code)
    text = (code or "").strip()
    if text.startswith("0x"):
        text = text[2:]
    if LIBRARY_PLACEHOLDER in text:
        raise ConfigurationError(
            "Compiled bytecode has unlinked library placeholders; link the libraries "
            "or verify without --local-check"
        )
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ConfigurationError(f"Bytecode is not valid hex: {e}") from e


def strip_metadata(code: bytes) -> bytes:
    """Drop the CBOR metadata appended by solc (its length is in the last two bytes)."""
    if len(code) < 2:
        return code
    metadata_length = int.from_bytes(code[-2:], "big")
    if metadata_length + 2 > len(code):
        return code
    return code[: -(metadata_length + 2)]


def blank_immutables(code: bytes, immutable_references: dict) -> bytes:
    buf = bytearray(code)
    for references in (immutable_references or {}).values():
        for ref in references:
            start, length = int(ref["start"]), int(ref["length"])
            buf[start:start + length] = b"\x00" * min(length, max(0, len(buf) - start))
    return bytes(buf)


def runtime_code_matches(deployed, compiled, immutable_references: dict | None = None) -> bool:
    """True when ``deployed`` is the runtime code produced by ``compiled``."""
    onchain = blank_immutables(to_bytes(deployed), immutable_references or {})
    local = blank_immutables(to_bytes(compiled), immutable_references or {})
    return strip_metadata(onchain) == strip_metadata(local)
