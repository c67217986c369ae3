"""
Token amounts and coins.

Allocations arrive as human-facing decimal strings ("1234.56") and are
converted to integer base units by truncation. Only Decimal, Fraction and
int are used; conversion and remainders are plain integer arithmetic, so they
never depend on the decimal context precision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Dict, Iterable, List, Tuple

from MN_Tool_Box.errors import AmountParseError

_AMOUNT_RE = re.compile(r"^\d+(\.\d+)?$")


@dataclass(frozen=True)
class TokenAmount:
    value: Decimal

    def _scaled(self, exponent: int) -> Tuple[int, int]:
        # value * 10**exponent == numerator / 10**shift, numerator exact
        _, digits, exp = self.value.as_tuple()
        numerator = int("".join(str(d) for d in digits) or "0")
        shift = -(exp + exponent)
        if shift <= 0:
            return numerator * 10 ** (-shift), 0
        return numerator, shift

    def to_base_units(self, exponent: int) -> int:
        numerator, shift = self._scaled(exponent)
        if shift == 0:
            return numerator
        return numerator // 10 ** shift

    def truncation_remainder(self, exponent: int) -> Fraction:
        """Fraction of one base unit dropped by to_base_units, exactly, in [0, 1)."""
        numerator, shift = self._scaled(exponent)
        if shift == 0:
            return Fraction(0)
        return Fraction(numerator % 10 ** shift, 10 ** shift)

    def __str__(self) -> str:
        return str(self.value)


def parse_token_amount(text: str) -> TokenAmount:
    if text is None:
        raise AmountParseError(text)
    cleaned = text.strip()
    if not _AMOUNT_RE.match(cleaned):
        raise AmountParseError(text)
    try:
        return TokenAmount(Decimal(cleaned))
    except InvalidOperation as e:
        raise AmountParseError(text) from e


@dataclass(frozen=True, order=True)
class Coin:
    denom: str
    amount: int

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}{self.denom}")

    def to_dict(self) -> dict:
        return {"denom": self.denom, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict) -> "Coin":
        return cls(denom=data["denom"], amount=int(data["amount"]))


def add_coins(*groups: Iterable[Coin]) -> Tuple[Coin, ...]:
    """Sum coin groups by denomination, dropping zero entries, sorted by denom."""
    totals: Dict[str, int] = {}
    for group in groups:
        for coin in group:
            totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
    return tuple(Coin(denom, amount) for denom, amount in sorted(totals.items()) if amount)


def coins_from_json(items: List[dict]) -> Tuple[Coin, ...]:
    return add_coins(Coin.from_dict(item) for item in items or [])


def coins_to_json(coins: Iterable[Coin]) -> List[dict]:
    return [coin.to_dict() for coin in coins]
