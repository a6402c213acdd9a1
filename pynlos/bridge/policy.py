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
Fail-open policy table
======================

Maps (entry point, failure condition) to the value handed back to the
positioning engine and the log level of the diagnostic.

================  ===============  =========  =======
Entry point       Condition        Default    Level
================  ===============  =========  =======
get_val           unavailable      1.0        TRACE
get_val           call failed      1.0        DEBUG
get_val           out of domain    1.0        DEBUG
check_sat         unavailable      False      TRACE
check_sat         call failed      False      DEBUG
check_vs          unavailable      False      TRACE
check_vs          call failed      False      DEBUG
store_info        unavailable      False      TRACE
store_info        call failed      False      DEBUG
store_info        out of domain    False      DEBUG
save_info         unavailable      None       INFO
save_info         call failed      None       INFO
================  ===============  =========  =======

Unavailable entry points are reported once at INFO when the bridge is
initialized, so the per-call repeat stays at TRACE.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.constants import DEFAULT_COEFFICIENT
from ..logger import TRACE
from .entry_points import EntryPoint
from .errors import CallError, ResolutionUnavailable


class FailureCondition(Enum):
    """Why a decision fell back to its default"""
    UNAVAILABLE = "unavailable"
    CALL_FAILED = "call_failed"
    OUT_OF_DOMAIN = "out_of_domain"


@dataclass(frozen=True)
class Fallback:
    """Default value and diagnostic level for one failure condition"""
    default: Any
    level: int


FALLBACK_POLICY = {
    (EntryPoint.GET_VAL, FailureCondition.UNAVAILABLE): Fallback(DEFAULT_COEFFICIENT, TRACE),
    (EntryPoint.GET_VAL, FailureCondition.CALL_FAILED): Fallback(DEFAULT_COEFFICIENT, logging.DEBUG),
    (EntryPoint.GET_VAL, FailureCondition.OUT_OF_DOMAIN): Fallback(DEFAULT_COEFFICIENT, logging.DEBUG),
    (EntryPoint.CHECK_SAT, FailureCondition.UNAVAILABLE): Fallback(False, TRACE),
    (EntryPoint.CHECK_SAT, FailureCondition.CALL_FAILED): Fallback(False, logging.DEBUG),
    (EntryPoint.CHECK_VS, FailureCondition.UNAVAILABLE): Fallback(False, TRACE),
    (EntryPoint.CHECK_VS, FailureCondition.CALL_FAILED): Fallback(False, logging.DEBUG),
    (EntryPoint.STORE_INFO, FailureCondition.UNAVAILABLE): Fallback(False, TRACE),
    (EntryPoint.STORE_INFO, FailureCondition.CALL_FAILED): Fallback(False, logging.DEBUG),
    (EntryPoint.STORE_INFO, FailureCondition.OUT_OF_DOMAIN): Fallback(False, logging.DEBUG),
    (EntryPoint.SAVE_INFO, FailureCondition.UNAVAILABLE): Fallback(None, logging.INFO),
    (EntryPoint.SAVE_INFO, FailureCondition.CALL_FAILED): Fallback(None, logging.INFO),
}


def condition_of(error: CallError) -> FailureCondition:
    """Failure condition for a marshaler error"""
    if isinstance(error, ResolutionUnavailable):
        return FailureCondition.UNAVAILABLE
    return FailureCondition.CALL_FAILED


def fallback_for(entry_point: EntryPoint, condition: FailureCondition) -> Fallback:
    """Look up the fallback; every reachable pair is in the table"""
    return FALLBACK_POLICY[(entry_point, condition)]


__all__ = ['FailureCondition', 'Fallback', 'FALLBACK_POLICY', 'condition_of', 'fallback_for']
