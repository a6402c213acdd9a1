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

"""
Decision Facade
===============

The typed queries the positioning engine makes per satellite per epoch.
Each one returns a native value and never raises for a classification
failure; failures map to the defaults in :mod:`pynlos.bridge.policy`.

Example
-------
>>> state = initialize("asset", ["/opt/gnss_analyze"])
>>> facade = DecisionFacade(state)
>>> key = SatelliteQueryKey("G05", 2200, 345600)
>>> facade.is_nlos(key)
False
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

import numpy as np

from ..core.constants import DEFAULT_COEFFICIENT
from ..core.satellite_numbering import sat2id
from ..core.time import GNSSTime, time2gpst
from .entry_points import EntryPoint
from .errors import BridgeShutdownError
from .lifecycle import BridgeState, Phase, is_available
from .marshaler import CallMarshaler, ResultKind
from .policy import FailureCondition, condition_of, fallback_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteQueryKey:
    """Satellite and epoch a decision is asked for"""
    satellite_id: str
    gps_week: int
    time_of_week: float

    def __post_init__(self):
        if not self.satellite_id:
            raise ValueError("satellite id must not be empty")
        if self.gps_week < 0:
            raise ValueError(f"GPS week cannot be negative: {self.gps_week}")

    @classmethod
    def from_sat(cls, sat: int, time: Union[GNSSTime, float]) -> 'SatelliteQueryKey':
        """Build a key from an internal satellite number and epoch time"""
        week, tow = time2gpst(time)
        return cls(sat2id(sat), week, tow)

    def marshal(self):
        """Arguments for check_sat, check_vs and get_val: (id, week, tow)"""
        return (self.satellite_id, int(self.gps_week), int(self.time_of_week))


class DecisionKind(Enum):
    """Kind of value a DecisionResult carries"""
    COEFFICIENT = "coefficient"
    NLOS_FLAG = "nlos"
    VIRTUAL_SAT_FLAG = "virtual_sat"
    STORE_ACK = "store_ack"


@dataclass(frozen=True)
class DecisionResult:
    """Validated, defaulted output of one call"""
    kind: DecisionKind
    value: Any
    fallback: bool = False
    reason: Optional[str] = None


class DecisionFacade:
    """
    Per-satellite advisory queries

    Parameters
    ----------
    state : BridgeState
        Initialized bridge
    observer : callable, optional
        Called with ``(key, DecisionResult)`` after every decision; ``key`` is
        the SatelliteQueryKey, or the store key string for store_info
    """

    def __init__(self, state: BridgeState,
                 observer: Optional[Callable[[Any, DecisionResult], None]] = None):
        self.state = state
        self.marshaler = CallMarshaler(state)
        self.observer = observer

    def get_coefficient(self, key: SatelliteQueryKey) -> float:
        """Variance scaling coefficient, always > 0; 1.0 on any failure"""
        result = self._call(EntryPoint.GET_VAL, DecisionKind.COEFFICIENT,
                            key.marshal(), ResultKind.FLOAT, key)
        if not result.fallback:
            value = result.value
            if not (np.isfinite(value) and value > 0):
                result = self._fall_back(EntryPoint.GET_VAL, DecisionKind.COEFFICIENT,
                                         FailureCondition.OUT_OF_DOMAIN,
                                         f"coefficient {value} is not positive", key)
            elif value == DEFAULT_COEFFICIENT:
                logger.trace(f"get_coff {key.satellite_id} result={value:f} LOS")
            else:
                logger.trace(f"get_coff {key.satellite_id} result={value:f} NLOS, scaled")
        return self._emit(key, result)

    def is_nlos(self, key: SatelliteQueryKey) -> bool:
        """True only if check_sat answered with an integer > 0"""
        return self._flag(EntryPoint.CHECK_SAT, DecisionKind.NLOS_FLAG, key)

    def is_virtual_satellite(self, key: SatelliteQueryKey) -> bool:
        """True only if check_vs answered with an integer > 0"""
        return self._flag(EntryPoint.CHECK_VS, DecisionKind.VIRTUAL_SAT_FLAG, key)

    def store_info(self, epoch_time: Union[GNSSTime, float], key: str, value: str) -> bool:
        """Write back a diagnostic value; True only on a positive acknowledgement"""
        week, tow = time2gpst(epoch_time)
        result = self._call(EntryPoint.STORE_INFO, DecisionKind.STORE_ACK,
                            (int(week), float(tow), str(key), str(value)),
                            ResultKind.INT, key)
        if not result.fallback:
            if result.value > 0:
                logger.trace(f"store_info {key} result={result.value}")
                result = DecisionResult(DecisionKind.STORE_ACK, True)
            else:
                result = self._fall_back(EntryPoint.STORE_INFO, DecisionKind.STORE_ACK,
                                         FailureCondition.OUT_OF_DOMAIN,
                                         f"store_info rejected with {result.value}", key)
        return self._emit(key, result)

    def _flag(self, entry_point: EntryPoint, kind: DecisionKind, key: SatelliteQueryKey) -> bool:
        result = self._call(entry_point, kind, key.marshal(), ResultKind.INT, key)
        if not result.fallback:
            logger.trace(f"{entry_point} {key.satellite_id} result={result.value}")
            result = DecisionResult(kind, result.value > 0)
        return self._emit(key, result)

    def _call(self, entry_point, kind, args, result_kind, key) -> DecisionResult:
        if self.state.phase == Phase.SHUT_DOWN:
            raise BridgeShutdownError(f"{entry_point} called after shutdown")
        if not is_available(self.state, entry_point):
            return self._fall_back(entry_point, kind, FailureCondition.UNAVAILABLE,
                                   "entry point unavailable", key)

        call = self.marshaler.invoke(entry_point, args, result_kind)
        if not call.ok:
            return self._fall_back(entry_point, kind, condition_of(call.error),
                                   call.error.reason, key)
        return DecisionResult(kind, call.value)

    def _fall_back(self, entry_point, kind, condition, reason, key) -> DecisionResult:
        rule = fallback_for(entry_point, condition)
        logger.log(rule.level, f"{entry_point} {_describe(key)} {condition.value}: {reason}, "
                               f"using {rule.default!r}")
        return DecisionResult(kind, rule.default, fallback=True, reason=reason)

    def _emit(self, key, result: DecisionResult):
        if self.observer is not None:
            self.observer(key, result)
        return result.value


def _describe(key) -> str:
    if isinstance(key, SatelliteQueryKey):
        return f"{key.satellite_id} {key.gps_week}/{key.time_of_week:.0f}"
    return str(key)


__all__ = ['SatelliteQueryKey', 'DecisionKind', 'DecisionResult', 'DecisionFacade']
