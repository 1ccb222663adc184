"""Short human-readable codes for items, batches, products and work orders."""

from __future__ import annotations

import secrets

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # no O/0/1/I


class CodeGenerator:
    """Random codes over :data:`ALPHABET`, prefixed per namespace.

    32**6 combinations per prefix keeps collisions negligible at shop scale;
    the unique constraints on the tables are the final guard.
    """

    def __init__(self, alphabet: str = ALPHABET):
        self.alphabet = alphabet

    def token(self, length: int) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(length))

    def sku(self, type_code: str) -> str:
        return f"{type_code.upper()}-{self.token(6)}"

    def batch(self) -> str:
        return f"BTCH-{self.token(8)}"

    def product(self) -> str:
        return f"PRD-{self.token(6)}"

    def work_order(self) -> str:
        return f"WO-{self.token(6)}"
