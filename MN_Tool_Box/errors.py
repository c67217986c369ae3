"""
Error taxonomy for genesis account generation.

All errors derive from ValueError so callers that only care about "bad input"
can catch one type, while the CLI can still report the precise cause.
"""

from __future__ import annotations

from typing import Optional


class GenesisToolError(ValueError):
    """Base class for every error raised by the genesis tooling."""


class ConfigError(GenesisToolError):
    pass


class IdentifierError(GenesisToolError):
    """An account identifier could not be normalized."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"invalid address ({raw}): {reason}")


class Bech32DecodeError(IdentifierError):
    """Bad charset, mixed case or checksum mismatch."""


class AddressPrefixError(IdentifierError):
    """Decoded human-readable part is not the expected prefix."""


class AddressFormatError(IdentifierError):
    """Decoded payload failed the chain's address format verification."""


class AmountParseError(GenesisToolError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"failed to parse token allocation amount: {raw!r}")


class ScheduleParameterError(GenesisToolError):
    def __init__(self, address: str, cliff: int, vesting: int, reason: str = ""):
        self.address = address
        self.cliff = cliff
        self.vesting = vesting
        message = f"unsupported account parameters for {address}: cliff={cliff}, vesting={vesting}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DuplicateAccountError(GenesisToolError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"address already exists in genesis state: {address}")


class LedgerError(GenesisToolError):
    def __init__(self, message: str, path: Optional[str] = None, row: Optional[int] = None):
        self.path = path
        self.row = row
        location = ""
        if path is not None:
            location = f"{path}:{row}: " if row is not None else f"{path}: "
        super().__init__(f"{location}{message}")


class GenesisFileError(GenesisToolError):
    pass


class ReconciliationError(GenesisToolError):
    pass
