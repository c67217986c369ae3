"""
Genesis document I/O and the auth/bank merge.

GenesisState owns the mutable side of the batch: it checks for duplicate
addresses, appends accounts and balances, keeps both collections sorted the
way the chain expects and accumulates the bank supply.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from MN_Account.account import BalanceRecord, GenesisAccountRecord
from MN_Account.amount import Coin, add_coins, coins_from_json, coins_to_json
from MN_Address.address import AccountAddress, decode_bech32
from MN_App.config import ChainConfig
from MN_Tool_Box.errors import DuplicateAccountError, GenesisFileError, GenesisToolError

logger = logging.getLogger(__name__)

AUTH_MODULE = "auth"
BANK_MODULE = "bank"

_TIME_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


def parse_genesis_time(text: Optional[str]) -> Optional[datetime.datetime]:
    """
    Parse an RFC 3339 genesis time (nanosecond fractions allowed).

    Returns None for a missing value or the zero time 0001-01-01T00:00:00Z.
    """
    if not text:
        return None
    match = _TIME_RE.match(text.strip())
    if not match:
        raise GenesisFileError(f"invalid genesis_time: {text!r}")

    stamp, fraction, zone = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if zone == "Z" else zone
    try:
        parsed = datetime.datetime.fromisoformat(f"{stamp}.{micros}{offset}")
    except ValueError as e:
        raise GenesisFileError(f"invalid genesis_time: {text!r}") from e

    parsed = parsed.astimezone(datetime.timezone.utc)
    if parsed == datetime.datetime(1, 1, 1, tzinfo=datetime.timezone.utc):
        return None
    return parsed


def account_address_of(entry: Dict[str, Any]) -> str:
    """Bech32 address of a genesis account entry of any account type."""
    if entry.get("address"):
        return entry["address"]
    for key in ("base_account", "base_vesting_account"):
        nested = entry.get(key)
        if isinstance(nested, dict):
            return account_address_of(nested)
    raise GenesisFileError(f"genesis account without address: {entry.get('@type', entry)}")


class GenesisDocument:
    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        if not isinstance(data, dict) or not isinstance(data.get("app_state"), dict):
            raise GenesisFileError("genesis document has no app_state object")
        self.data = data
        self.path = path

    @property
    def app_state(self) -> Dict[str, Any]:
        return self.data["app_state"]

    @property
    def genesis_time(self) -> Optional[datetime.datetime]:
        return parse_genesis_time(self.data.get("genesis_time"))

    def module_state(self, module: str) -> Dict[str, Any]:
        state = self.app_state.get(module)
        if not isinstance(state, dict):
            raise GenesisFileError(f"genesis app_state has no '{module}' module state")
        return state

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2) + "\n"

    def write(self, path: str | Path) -> Path:
        """Write the document through a temporary file so a failure leaves no partial file."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(self.to_json())
            Path(tmp_name).replace(target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target


def load_genesis(path: str | Path) -> GenesisDocument:
    genesis_path = Path(path)
    try:
        data = json.loads(genesis_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise GenesisFileError(f"genesis file not found: {genesis_path}") from e
    except json.JSONDecodeError as e:
        raise GenesisFileError(f"failed to unmarshal genesis state: {e}") from e
    return GenesisDocument(data, genesis_path)


class GenesisState:
    def __init__(self, document: GenesisDocument, config: Optional[ChainConfig] = None):
        self.document = document
        self.config = config or ChainConfig()

        auth_state = document.module_state(AUTH_MODULE)
        bank_state = document.module_state(BANK_MODULE)
        self.accounts: List[Dict[str, Any]] = list(auth_state.get("accounts") or [])
        self.balances: List[Dict[str, Any]] = list(bank_state.get("balances") or [])
        try:
            self.supply = coins_from_json(bank_state.get("supply") or [])
        except (KeyError, TypeError, ValueError) as e:
            raise GenesisFileError(f"invalid bank supply: {e}") from e

        self._account_addresses: Set[AccountAddress] = {
            self._decode(account_address_of(entry)) for entry in self.accounts
        }
        self._balance_addresses: Set[AccountAddress] = {
            self._decode(entry.get("address", "")) for entry in self.balances
        }
        logger.info("loaded genesis state with %d accounts and %d balances",
                    len(self.accounts), len(self.balances))

    def _decode(self, address: str) -> AccountAddress:
        try:
            payload = decode_bech32(address, self.config.native_prefix)
        except GenesisToolError as e:
            raise GenesisFileError(f"invalid address in genesis state: {e}") from e
        return AccountAddress(payload, prefix=self.config.native_prefix)

    def contains(self, address: AccountAddress) -> bool:
        return address in self._account_addresses

    def add(self, account: GenesisAccountRecord, balance: BalanceRecord) -> None:
        address = account.address
        if address in self._account_addresses or address in self._balance_addresses:
            raise DuplicateAccountError(str(address))

        self.accounts.append(account.to_dict())
        self._account_addresses.add(address)
        self.balances.append(balance.to_dict())
        self._balance_addresses.add(address)
        self.supply = add_coins(self.supply, balance.coins)

    def find_account(self, address: AccountAddress) -> Optional[Dict[str, Any]]:
        for entry in self.accounts:
            if self._decode(account_address_of(entry)) == address:
                return entry
        return None

    def find_balance(self, address: AccountAddress) -> Optional[Dict[str, Any]]:
        for entry in self.balances:
            if self._decode(entry["address"]) == address:
                return entry
        return None

    def supply_of(self, denom: str) -> int:
        return sum(coin.amount for coin in self.supply if coin.denom == denom)

    def sanitize(self) -> None:
        self.accounts.sort(key=lambda entry: int(_base_account_of(entry).get("account_number", 0) or 0))
        self.balances.sort(key=lambda entry: self._decode(entry["address"]).raw)
        for entry in self.balances:
            entry["coins"] = coins_to_json(coins_from_json(entry.get("coins") or []))

    def commit(self) -> GenesisDocument:
        """Write the sanitized auth and bank sections back into the document."""
        self.sanitize()
        self.document.module_state(AUTH_MODULE)["accounts"] = self.accounts
        bank_state = self.document.module_state(BANK_MODULE)
        bank_state["balances"] = self.balances
        bank_state["supply"] = coins_to_json(self.supply)
        return self.document


def _base_account_of(entry: Dict[str, Any]) -> Dict[str, Any]:
    if "base_vesting_account" in entry:
        return entry["base_vesting_account"].get("base_account", {})
    if "base_account" in entry:
        return entry["base_account"]
    return entry


def add_balance_coins(entry: Dict[str, Any], coins: List[Coin]) -> None:
    entry["coins"] = coins_to_json(add_coins(coins_from_json(entry.get("coins") or []), coins))
