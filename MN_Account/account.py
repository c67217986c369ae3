"""
Genesis account generation.

AccountGenerator turns one ledger allocation into a genesis account record
and its bank balance. It is stateless: the same inputs always produce the
same records and nothing outside the returned values is touched.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from MN_Address.address import AccountAddress, AddressNormalizer
from MN_App.config import ChainConfig
from .amount import Coin, TokenAmount, add_coins, coins_to_json, parse_token_amount
from .vesting import (
    CliffLinearVesting,
    CliffVesting,
    LinearVesting,
    NoVesting,
    VestingSchedule,
    select_schedule,
)

logger = logging.getLogger(__name__)

BASE_ACCOUNT_TYPE = "/cosmos.auth.v1beta1.BaseAccount"
DELAYED_VESTING_ACCOUNT_TYPE = "/cosmos.vesting.v1beta1.DelayedVestingAccount"
CONTINUOUS_VESTING_ACCOUNT_TYPE = "/cosmos.vesting.v1beta1.ContinuousVestingAccount"


@dataclass(frozen=True)
class BalanceRecord:
    address: AccountAddress
    coins: Tuple[Coin, ...]

    def to_dict(self) -> dict:
        return {"address": str(self.address), "coins": coins_to_json(self.coins)}


@dataclass(frozen=True)
class GenesisAccountRecord:
    address: AccountAddress
    schedule: VestingSchedule
    original_vesting: Tuple[Coin, ...] = ()
    account_number: int = 0
    sequence: int = 0

    @property
    def is_vesting(self) -> bool:
        return not isinstance(self.schedule, NoVesting)

    @property
    def type_url(self) -> str:
        return _TYPE_URLS[type(self.schedule)]

    def _base_account(self) -> dict:
        return {
            "address": str(self.address),
            "pub_key": None,
            "account_number": str(self.account_number),
            "sequence": str(self.sequence),
        }

    def to_dict(self) -> dict:
        """Encode the account the way the auth module stores it in genesis JSON."""
        schedule = self.schedule
        if isinstance(schedule, NoVesting):
            return {"@type": BASE_ACCOUNT_TYPE, **self._base_account()}

        base_vesting = {
            "base_account": self._base_account(),
            "original_vesting": coins_to_json(self.original_vesting),
            "delegated_free": [],
            "delegated_vesting": [],
            "end_time": str(schedule.end_time),
        }
        if isinstance(schedule, CliffVesting):
            return {"@type": DELAYED_VESTING_ACCOUNT_TYPE, "base_vesting_account": base_vesting}
        return {
            "@type": CONTINUOUS_VESTING_ACCOUNT_TYPE,
            "base_vesting_account": base_vesting,
            "start_time": str(schedule.start_time),
        }


_TYPE_URLS = {
    NoVesting: BASE_ACCOUNT_TYPE,
    CliffVesting: DELAYED_VESTING_ACCOUNT_TYPE,
    LinearVesting: CONTINUOUS_VESTING_ACCOUNT_TYPE,
    CliffLinearVesting: CONTINUOUS_VESTING_ACCOUNT_TYPE,
}


class AccountGenerator:
    def __init__(self, config: Optional[ChainConfig] = None):
        self.config = config or ChainConfig()
        self.normalizer = AddressNormalizer(self.config)

    def base_units(self, amount: TokenAmount) -> int:
        return amount.to_base_units(self.config.base_unit_exponent)

    def generate(self, address: AccountAddress, token_alloc: str,
                 reference_time: Optional[datetime.datetime],
                 cliff: int, vesting: int) -> Tuple[GenesisAccountRecord, BalanceRecord]:
        """
        Build the genesis account and balance for one allocation.

        Args:
            address: normalized account address
            token_alloc: allocation in display units, e.g. "1234.56"
            reference_time: genesis time, or None when the chain has none yet
            cliff: cliff length in months
            vesting: linear vesting length in months

        Raises:
            AmountParseError: token_alloc is not a non-negative decimal
            ScheduleParameterError: the cliff/vesting/time combination is unsupported
        """
        amount = parse_token_amount(token_alloc)
        coins = add_coins([Coin(self.config.base_denom, self.base_units(amount))])
        balance = BalanceRecord(address=address, coins=coins)

        schedule = select_schedule(str(address), reference_time, cliff, vesting)
        if isinstance(schedule, NoVesting):
            account = GenesisAccountRecord(address=address, schedule=schedule)
        else:
            account = GenesisAccountRecord(address=address, schedule=schedule, original_vesting=coins)

        logger.debug("generated %s for %s with %s", type(schedule).__name__, address, coins)
        return account, balance

    def generate_from_raw(self, raw_address: str, token_alloc: str,
                          reference_time: Optional[datetime.datetime],
                          cliff: int, vesting: int) -> Tuple[GenesisAccountRecord, BalanceRecord]:
        address = self.normalizer.normalize(raw_address)
        return self.generate(address, token_alloc, reference_time, cliff, vesting)
