"""
Genesis state merge for ledger-generated accounts.

Loads an existing genesis document, merges generated accounts and balances
into its auth and bank sections, and optionally reconciles total supply.
"""

from .state import GenesisDocument, GenesisState, load_genesis, parse_genesis_time
from .builder import BatchSummary, GenesisAccountsBuilder, build_genesis_accounts
from .reconcile import reconcile_supply

__all__ = [
    'BatchSummary',
    'GenesisAccountsBuilder',
    'GenesisDocument',
    'GenesisState',
    'build_genesis_accounts',
    'load_genesis',
    'parse_genesis_time',
    'reconcile_supply',
]
