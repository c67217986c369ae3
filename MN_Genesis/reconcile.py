"""
Total-supply reconciliation.

Truncating each allocation to whole base units loses a fraction of a unit per
account. When an exact total supply is required, the missing units are
credited to one designated account in a single explicit step after the whole
batch has been merged. Nothing here runs unless the caller asks for it.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Optional

from MN_Account.amount import Coin, add_coins, coins_from_json, coins_to_json
from MN_Address.address import AccountAddress
from MN_Tool_Box.errors import ReconciliationError

from .state import GenesisState, add_balance_coins

logger = logging.getLogger(__name__)


def remainder_top_up(truncated: Fraction) -> int:
    """Whole base units lost to truncation across a batch."""
    if truncated < 0:
        raise ReconciliationError(f"negative truncation remainder: {truncated}")
    return math.floor(truncated)


def target_top_up(state: GenesisState, denom: str, target: int) -> int:
    current = state.supply_of(denom)
    if target < current:
        raise ReconciliationError(
            f"target supply {target}{denom} is below the current supply {current}{denom}"
        )
    return target - current


def reconcile_supply(state: GenesisState, address: AccountAddress, denom: str, amount: int) -> Optional[Coin]:
    """
    Credit amount base units of denom to an account already in the state.

    The balance, the supply and, for vesting accounts, original_vesting are all
    raised so the credited units follow the account's schedule.
    """
    if amount < 0:
        raise ReconciliationError(f"cannot reconcile a negative amount: {amount}")
    if amount == 0:
        logger.info("supply already reconciled; nothing to credit")
        return None

    account = state.find_account(address)
    balance = state.find_balance(address)
    if account is None or balance is None:
        raise ReconciliationError(f"reconciliation account not found in genesis state: {address}")

    top_up = Coin(denom, amount)
    add_balance_coins(balance, [top_up])
    vesting = account.get("base_vesting_account")
    if isinstance(vesting, dict):
        vesting["original_vesting"] = coins_to_json(
            add_coins(coins_from_json(vesting.get("original_vesting") or []), [top_up])
        )
    state.supply = add_coins(state.supply, [top_up])

    logger.info("credited %d%s to %s to reconcile total supply", amount, denom, address)
    return top_up
