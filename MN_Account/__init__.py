"""Genesis account generation: amounts, vesting schedules and account records."""

from MN_Tool_Box.errors import (
    AmountParseError,
    GenesisToolError,
    ScheduleParameterError,
)
from .amount import Coin, TokenAmount, parse_token_amount
from .vesting import (
    CliffLinearVesting,
    CliffVesting,
    LinearVesting,
    NoVesting,
    add_months,
    select_schedule,
)
from .account import AccountGenerator, BalanceRecord, GenesisAccountRecord

__all__ = [
    'AccountGenerator',
    'AmountParseError',
    'BalanceRecord',
    'CliffLinearVesting',
    'CliffVesting',
    'Coin',
    'GenesisAccountRecord',
    'GenesisToolError',
    'LinearVesting',
    'NoVesting',
    'ScheduleParameterError',
    'TokenAmount',
    'add_months',
    'parse_token_amount',
    'select_schedule',
]
