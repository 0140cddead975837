# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prefixed, roughly time-ordered identifiers (e.g. ``DRL-lq3k2a-9f1c0b2e``)."""
import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = _ALPHABET[r] + out
        if n == 0:
            return out


def generate_id(prefix: str) -> str:
    return f"{prefix}-{_base36(int(time.time() * 1000))}-{secrets.token_hex(4)}"


def generate_drill_id() -> str:
    return generate_id("DRL")