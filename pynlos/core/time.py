# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GPS time representation used to build query keys"""

from datetime import datetime, timedelta
from typing import Tuple, Union

from .constants import GPST0, WEEK_SECONDS


class GNSSTime:
    """GPS week / time of week

    Time of week is normalised to [0, 604800) on construction, carrying
    whole weeks into ``week``.
    """

    def __init__(self, week: int = 0, tow: float = 0.0, time_sys: str = 'GPS'):
        """
        Initialize GNSS time

        Parameters:
        -----------
        week : int
            Week number
        tow : float
            Time of week in seconds
        time_sys : str
            Time system, only 'GPS' is accepted
        """
        self.week = int(week)
        self.tow = float(tow)
        self.time_sys = time_sys.upper()

        if self.time_sys != 'GPS':
            raise ValueError(f"Invalid time system: {time_sys}. Must be 'GPS'")

        while self.tow >= WEEK_SECONDS:
            self.week += 1
            self.tow -= WEEK_SECONDS
        while self.tow < 0:
            self.week -= 1
            self.tow += WEEK_SECONDS

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'GNSSTime':
        """Create GNSSTime from a datetime already expressed in GPS time"""
        delta = dt - datetime(*GPST0)
        weeks = delta.days // 7
        tow = (delta.days % 7) * 86400 + delta.seconds + delta.microseconds * 1e-6
        return cls(weeks, tow)

    @classmethod
    def from_gps_seconds(cls, gps_seconds: float) -> 'GNSSTime':
        """Create GNSSTime from GPS seconds since GPS epoch"""
        week = int(gps_seconds // WEEK_SECONDS)
        tow = gps_seconds % WEEK_SECONDS
        return cls(week, tow)

    def to_datetime(self) -> datetime:
        """Convert to datetime object"""
        return datetime(*GPST0) + timedelta(weeks=self.week, seconds=self.tow)

    def to_gps_seconds(self) -> float:
        """Convert to GPS seconds since GPS epoch"""
        return self.week * WEEK_SECONDS + self.tow

    def add_seconds(self, seconds: float) -> 'GNSSTime':
        """Add seconds to time"""
        return GNSSTime(self.week, self.tow + seconds)

    def __add__(self, seconds: float) -> 'GNSSTime':
        if isinstance(seconds, (int, float)):
            return self.add_seconds(seconds)
        raise TypeError(f"Cannot add {type(seconds)} to GNSSTime")

    def __sub__(self, other: Union['GNSSTime', float]) -> Union[float, 'GNSSTime']:
        """Subtract time (seconds between) or seconds (shifted time)"""
        if isinstance(other, GNSSTime):
            return (self.week - other.week) * WEEK_SECONDS + (self.tow - other.tow)
        elif isinstance(other, (int, float)):
            return self.add_seconds(-other)
        raise TypeError(f"Cannot subtract {type(other)} from GNSSTime")

    def __lt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return (self.week, self.tow) < (other.week, other.tow)

    def __le__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return (self.week, self.tow) <= (other.week, other.tow)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return self.week == other.week and abs(self.tow - other.tow) < 1e-9

    def __hash__(self):
        return hash((self.week, round(self.tow, 9)))

    def __str__(self):
        return f"{self.time_sys} Week: {self.week}, TOW: {self.tow:.3f}"

    def __repr__(self):
        return f"GNSSTime({self.week}, {self.tow}, '{self.time_sys}')"


def gps_seconds_to_week_tow(gps_seconds: float) -> Tuple[int, float]:
    """
    Convert GPS seconds to GPS week number and time of week

    Parameters:
    -----------
    gps_seconds : float
        GPS seconds since GPS epoch (Jan 6, 1980 00:00:00)

    Returns:
    --------
    tuple : (week, tow)
        GPS week number and time of week in seconds
    """
    if gps_seconds < 0:
        raise ValueError(f"GPS seconds cannot be negative: {gps_seconds}")

    week = int(gps_seconds // WEEK_SECONDS)
    tow = gps_seconds % WEEK_SECONDS
    return week, tow


def time2gpst(time: Union[GNSSTime, datetime, float]) -> Tuple[int, float]:
    """Convert an epoch time to (GPS week, time of week)

    Accepts a GNSSTime, a datetime in GPS time or GPS seconds.
    """
    if isinstance(time, GNSSTime):
        return time.week, time.tow
    if isinstance(time, datetime):
        gt = GNSSTime.from_datetime(time)
        return gt.week, gt.tow
    return gps_seconds_to_week_tow(float(time))


__all__ = ['GNSSTime', 'gps_seconds_to_week_tow', 'time2gpst']
