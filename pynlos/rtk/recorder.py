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

"""Per-run record of advisory decisions"""

import logging
from typing import Any, Dict, List

import pandas as pd

from ..bridge.facade import DecisionResult, SatelliteQueryKey

logger = logging.getLogger(__name__)

COLUMNS = ['satellite_id', 'gps_week', 'tow', 'kind', 'value', 'fallback', 'reason']


class DecisionRecorder:
    """
    Facade observer keeping one row per decision

    Pass ``recorder`` as the ``observer`` of a DecisionFacade, then call
    ``to_dataframe`` or ``summary`` once the run is over.
    """

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []

    def __call__(self, key, result: DecisionResult):
        if isinstance(key, SatelliteQueryKey):
            sat_id, week, tow = key.satellite_id, key.gps_week, key.time_of_week
        else:
            sat_id, week, tow = str(key), None, None
        self.rows.append({
            'satellite_id': sat_id,
            'gps_week': week,
            'tow': tow,
            'kind': result.kind.value,
            'value': result.value,
            'fallback': result.fallback,
            'reason': result.reason,
        })

    def __len__(self):
        return len(self.rows)

    def clear(self):
        self.rows = []

    def to_dataframe(self) -> pd.DataFrame:
        """All decisions, in call order"""
        return pd.DataFrame(self.rows, columns=COLUMNS)

    def summary(self) -> pd.DataFrame:
        """Calls, fallbacks and positive answers per decision kind"""
        df = self.to_dataframe()
        if df.empty:
            return pd.DataFrame(columns=['calls', 'fallbacks', 'positive']).rename_axis('kind')

        # Coefficients count as positive when they scale (!= 1.0)
        positive = df.apply(
            lambda row: bool(row['value'] != 1.0) if row['kind'] == 'coefficient'
            else bool(row['value']),
            axis=1)
        summary = pd.DataFrame({
            'calls': df.groupby('kind').size(),
            'fallbacks': df.groupby('kind')['fallback'].sum().astype(int),
            'positive': positive.groupby(df['kind']).sum().astype(int),
        })
        return summary

    def log_summary(self, log: logging.Logger = None):
        log = log or logger
        summary = self.summary()
        for kind, row in summary.iterrows():
            log.info(f"{kind}: {row['calls']} calls, {row['fallbacks']} defaulted, "
                     f"{row['positive']} positive")


__all__ = ['DecisionRecorder']
