"""
Vesting schedules for genesis accounts.

A schedule is one of four variants, chosen from the cliff and vesting lengths
(whole calendar months) and the genesis reference time:

    cliff > 0, vesting > 0, time set  -> CliffLinearVesting
    cliff = 0, vesting > 0, time set  -> LinearVesting
    cliff > 0, vesting = 0            -> CliffVesting (delayed, unlocks at once)
    cliff = 0, vesting = 0            -> NoVesting

Boundaries are absolute Unix timestamps in seconds.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Optional, Union

from MN_Tool_Box.errors import ScheduleParameterError

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def add_months(moment: datetime.datetime, months: int) -> datetime.datetime:
    """
    Add whole calendar months, normalizing day overflow into the next month.

    2022-01-31 + 1 month is 2022-03-03 (February has no 31st), the same rule
    the chain node applies when it adds months to a date.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    first = moment.replace(year=year, month=month, day=1)
    return first + datetime.timedelta(days=moment.day - 1)


def to_unix(moment: datetime.datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return int((moment - UNIX_EPOCH).total_seconds())


@dataclass(frozen=True)
class NoVesting:
    """Balance is spendable from genesis."""

    def locked_fraction(self, at: int) -> float:
        return 0.0


@dataclass(frozen=True)
class CliffVesting:
    """Whole balance locked until end_time, then released atomically."""

    end_time: int

    def locked_fraction(self, at: int) -> float:
        return 1.0 if at < self.end_time else 0.0


@dataclass(frozen=True)
class _ContinuousVesting:
    start_time: int
    end_time: int

    def locked_fraction(self, at: int) -> float:
        if at <= self.start_time:
            return 1.0
        if at >= self.end_time:
            return 0.0
        return (self.end_time - at) / (self.end_time - self.start_time)


@dataclass(frozen=True)
class LinearVesting(_ContinuousVesting):
    """Linear release from the reference time."""


@dataclass(frozen=True)
class CliffLinearVesting(_ContinuousVesting):
    """Linear release starting once the cliff has passed."""


VestingSchedule = Union[NoVesting, CliffVesting, LinearVesting, CliffLinearVesting]


def select_schedule(address: str, reference_time: Optional[datetime.datetime],
                    cliff: int, vesting: int) -> VestingSchedule:
    if cliff < 0 or vesting < 0:
        raise ScheduleParameterError(address, cliff, vesting, "month counts must not be negative")

    if cliff == 0 and vesting == 0:
        return NoVesting()

    if vesting == 0:
        anchor = reference_time
        if anchor is None:
            logger.warning("no genesis time for %s; cliff of %d months counted from the Unix epoch", address, cliff)
            anchor = UNIX_EPOCH
        return CliffVesting(end_time=to_unix(add_months(anchor, cliff)))

    if reference_time is None:
        raise ScheduleParameterError(address, cliff, vesting, "vesting requires a genesis time")

    if cliff > 0:
        start = add_months(reference_time, cliff)
        end = add_months(start, vesting)
        return CliffLinearVesting(start_time=to_unix(start), end_time=to_unix(end))

    end = add_months(reference_time, vesting)
    return LinearVesting(start_time=to_unix(reference_time), end_time=to_unix(end))
