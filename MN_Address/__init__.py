"""Bech32 account address handling."""

from .address import AccountAddress, AddressNormalizer, decode_bech32, verify_address_format

__all__ = [
    'AccountAddress',
    'AddressNormalizer',
    'decode_bech32',
    'verify_address_format',
]
