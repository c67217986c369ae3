"""
Batch driver: ledger records in, merged genesis state out.

Generation is per-row and pure; merging into GenesisState is serialized here.
The first failing row aborts the batch by propagating its error, so callers
never write a partially updated genesis file.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterable, List, Optional

from MN_Account.account import AccountGenerator, BalanceRecord, GenesisAccountRecord
from MN_Account.amount import Coin, parse_token_amount
from MN_App.config import ChainConfig
from MN_App.ledger import LedgerRecord

from .reconcile import reconcile_supply, remainder_top_up, target_top_up
from .state import GenesisState

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    accounts_added: int = 0
    rows_skipped: int = 0
    base_units_added: int = 0
    truncated: Fraction = field(default_factory=Fraction)
    reconciled: Optional[Coin] = None

    def to_dict(self) -> dict:
        return {
            "accounts_added": self.accounts_added,
            "rows_skipped": self.rows_skipped,
            "base_units_added": str(self.base_units_added),
            "truncated_base_units": str(self.truncated),
            "reconciled": self.reconciled.to_dict() if self.reconciled else None,
        }


class GenesisAccountsBuilder:
    def __init__(self, state: GenesisState, config: Optional[ChainConfig] = None,
                 genesis_time: Optional[datetime.datetime] = None):
        self.state = state
        self.config = config or state.config
        self.genesis_time = genesis_time
        self.generator = AccountGenerator(self.config)
        self.summary = BatchSummary()

    def add_record(self, record: LedgerRecord) -> Optional[GenesisAccountRecord]:
        if not record.address:
            logger.info("Skipping account: %s", record.label)
            self.summary.rows_skipped += 1
            return None

        account, balance = self.generator.generate_from_raw(
            record.address, record.allocation, self.genesis_time, record.cliff, record.vesting
        )
        self.state.add(account, balance)
        self._track(record, balance)
        return account

    def add_records(self, records: Iterable[LedgerRecord]) -> BatchSummary:
        for record in records:
            self.add_record(record)
        return self.summary

    def _track(self, record: LedgerRecord, balance: BalanceRecord) -> None:
        exponent = self.config.base_unit_exponent
        self.summary.accounts_added += 1
        self.summary.base_units_added += sum(coin.amount for coin in balance.coins)
        self.summary.truncated += parse_token_amount(record.allocation).truncation_remainder(exponent)

    def reconcile(self, raw_address: str, target_supply: Optional[str] = None) -> Optional[Coin]:
        """
        Credit truncated base units to raw_address.

        With target_supply (display units) the credit is whatever brings the
        base denom supply up to that target; otherwise it is the whole base
        units lost to truncation in this batch.
        """
        address = self.generator.normalizer.normalize(raw_address)
        denom = self.config.base_denom
        if target_supply is not None:
            target = self.generator.base_units(parse_token_amount(target_supply))
            amount = target_top_up(self.state, denom, target)
        else:
            amount = remainder_top_up(self.summary.truncated)
        self.summary.reconciled = reconcile_supply(self.state, address, denom, amount)
        return self.summary.reconciled

    def finalize(self):
        return self.state.commit()


def build_genesis_accounts(state: GenesisState, records: List[LedgerRecord],
                           genesis_time: Optional[datetime.datetime] = None) -> BatchSummary:
    builder = GenesisAccountsBuilder(state, genesis_time=genesis_time)
    summary = builder.add_records(records)
    builder.finalize()
    return summary
