"""
Account address normalization.

Ledger rows may name an account either with the foreign (Cosmos Hub) bech32
prefix or with the chain's native prefix. Both decode to the same raw bytes,
which are what the genesis state is keyed on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from bech32 import bech32_decode, bech32_encode, convertbits

from MN_App.config import ChainConfig
from MN_Tool_Box.errors import AddressFormatError, AddressPrefixError, Bech32DecodeError

logger = logging.getLogger(__name__)

# Upper bound enforced by the SDK for any address payload
MAX_ADDRESS_LENGTH = 255


@dataclass(frozen=True)
class AccountAddress:
    """Raw account address bytes; equality and hashing are byte-exact."""

    raw: bytes
    prefix: str = "umee"

    def __eq__(self, other) -> bool:
        if not isinstance(other, AccountAddress):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __lt__(self, other: "AccountAddress") -> bool:
        return self.raw < other.raw

    def to_bech32(self, prefix: Optional[str] = None) -> str:
        return bech32_encode(prefix or self.prefix, convertbits(self.raw, 8, 5))

    def __str__(self) -> str:
        return self.to_bech32()

    def __repr__(self) -> str:
        return f"AccountAddress({self.to_bech32()})"


def decode_bech32(raw: str, expected_prefix: str) -> bytes:
    """Decode a bech32 string and check its human-readable part."""
    if not raw:
        raise Bech32DecodeError(raw, "must provide an address")

    hrp, data = bech32_decode(raw)
    if hrp is None or data is None:
        raise Bech32DecodeError(raw, "decoding bech32 failed")
    if hrp != expected_prefix:
        raise AddressPrefixError(raw, f"invalid bech32 prefix; expected {expected_prefix}, got {hrp}")

    payload = convertbits(data, 5, 8, False)
    if payload is None:
        raise Bech32DecodeError(raw, "invalid bech32 data padding")
    return bytes(payload)


def verify_address_format(raw: str, payload: bytes, address_length: int) -> None:
    if len(payload) == 0:
        raise AddressFormatError(raw, "addresses cannot be empty")
    if len(payload) > MAX_ADDRESS_LENGTH:
        raise AddressFormatError(raw, f"address max length is {MAX_ADDRESS_LENGTH}, got {len(payload)}")
    if len(payload) != address_length:
        raise AddressFormatError(raw, f"invalid address length; expected {address_length}, got {len(payload)}")


class AddressNormalizer:
    def __init__(self, config: Optional[ChainConfig] = None):
        self.config = config or ChainConfig()

    def normalize(self, raw: str) -> AccountAddress:
        raw = raw.strip()
        if raw.startswith(self.config.foreign_prefix):
            payload = decode_bech32(raw, self.config.foreign_prefix)
            logger.debug("converted %s address %s", self.config.foreign_prefix, raw)
        else:
            payload = decode_bech32(raw, self.config.native_prefix)

        verify_address_format(raw, payload, self.config.address_length)
        return AccountAddress(payload, prefix=self.config.native_prefix)
