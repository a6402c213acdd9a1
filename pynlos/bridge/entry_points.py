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

"""Entry points a classification module may expose"""

from enum import Enum
from typing import Protocol

from ..core.constants import (
    ENTRY_CHECK_SAT, ENTRY_CHECK_VS, ENTRY_STORE_INFO, ENTRY_SAVE_INFO, ENTRY_GET_VAL
)


class EntryPoint(Enum):
    """Names resolved on the classification module at initialization"""
    CHECK_SAT = ENTRY_CHECK_SAT
    CHECK_VS = ENTRY_CHECK_VS
    STORE_INFO = ENTRY_STORE_INFO
    SAVE_INFO = ENTRY_SAVE_INFO
    GET_VAL = ENTRY_GET_VAL

    def __str__(self):
        return self.value


class ClassificationEngine(Protocol):
    """Interface a classification module implements

    Every function is optional; the bridge resolves each one by name and
    degrades to a safe default for any that is missing.
    """

    def check_sat(self, sat_id: str, week: int, tow: int) -> int:
        """>0 if the satellite is NLOS at this epoch"""

    def check_vs(self, sat_id: str, week: int, tow: int) -> int:
        """>0 if the satellite is a virtual satellite at this epoch"""

    def get_val(self, sat_id: str, week: int, tow: int) -> float:
        """Variance scaling coefficient, 1.0 for line-of-sight"""

    def store_info(self, week: int, tow: float, key: str, value: str) -> int:
        """Write back a diagnostic value, >0 on success"""

    def save_info(self):
        """Persist whatever was stored during the run"""


__all__ = ['EntryPoint', 'ClassificationEngine']
