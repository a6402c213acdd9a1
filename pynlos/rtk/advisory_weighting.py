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
Advisory Weighting Module
=========================

Applies classification decisions to a satellite's observation: whether it is
used at all, whether it takes part in ambiguity resolution, and how much its
variance is inflated. The configuration decides which queries are made, so a
disabled feature costs no call into the classification engine.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Union

import numpy as np

from ..bridge.facade import DecisionFacade, SatelliteQueryKey
from ..core.config import AdvisoryConfig, ArMode, VarianceMode
from ..core.constants import DEFAULT_COEFFICIENT
from ..core.satellite_numbering import sat2id
from ..core.time import GNSSTime, time2gpst

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteAdvice:
    """How one satellite observation is used at one epoch"""
    satellite_id: str
    include: bool = True
    use_in_ar: bool = True
    variance_scale: float = 1.0
    nlos: bool = False
    virtual: bool = False


class AdvisoryWeighting:
    """
    Per-epoch satellite advice for the positioning engine

    Parameters
    ----------
    facade : DecisionFacade
        Decision queries into the classification engine
    config : AdvisoryConfig
        Environment overrides read at startup
    """

    def __init__(self, facade: DecisionFacade, config: AdvisoryConfig):
        self.facade = facade
        self.config = config

    @property
    def needs_nlos(self) -> bool:
        return self.config.exclude_nlos or self.config.ar == ArMode.EXCLUDE_NLOS

    def advise_key(self, key: SatelliteQueryKey) -> SatelliteAdvice:
        """Advice for one satellite at the epoch carried by ``key``"""
        config = self.config

        nlos = self.facade.is_nlos(key) if self.needs_nlos else False
        virtual = self.facade.is_virtual_satellite(key) if config.handle_virtual else False

        include = not (config.exclude_nlos and nlos) and not virtual
        use_in_ar = include and not (config.ar == ArMode.EXCLUDE_NLOS and nlos)

        scale = 1.0
        if include and config.variance != VarianceMode.TRADITIONAL:
            scale = self.variance_scale(self.facade.get_coefficient(key))

        if not include:
            logger.debug(f"{key.satellite_id} excluded (nlos={nlos}, virtual={virtual})")
        elif not use_in_ar:
            logger.debug(f"{key.satellite_id} excluded from AR (nlos)")

        return SatelliteAdvice(key.satellite_id, include, use_in_ar, scale, nlos, virtual)

    def advise(self, sat: Union[int, str], time: Union[GNSSTime, float]) -> SatelliteAdvice:
        """
        Advice for a satellite given as internal number or id string

        A satellite without an id (number outside the numbering table, empty
        string) gets the default advice without querying the engine.
        """
        sat_id = sat.strip() if isinstance(sat, str) else sat2id(sat)
        if not sat_id:
            logger.debug(f"no satellite id for {sat!r}, using default advice")
            return SatelliteAdvice(str(sat))
        week, tow = time2gpst(time)
        return self.advise_key(SatelliteQueryKey(sat_id, week, tow))

    def advise_epoch(self, sats: Iterable[Union[int, str]],
                     time: Union[GNSSTime, float]) -> Dict[Union[int, str], SatelliteAdvice]:
        """Advice for every satellite of one epoch, in the order given"""
        return {sat: self.advise(sat, time) for sat in sats}

    def variance_scale(self, coefficient: float) -> float:
        """Variance multiplier for a coefficient under the configured mode"""
        mode = self.config.variance
        if mode == VarianceMode.TRADITIONAL:
            return 1.0
        if mode == VarianceMode.SCALED and coefficient != DEFAULT_COEFFICIENT:
            return coefficient * self.config.k
        return coefficient

    @staticmethod
    def scale_variances(variances: np.ndarray, advice: Sequence[SatelliteAdvice]) -> np.ndarray:
        """
        Apply advice to observation variances

        Excluded satellites get an infinite variance (zero weight).

        Parameters
        ----------
        variances : np.ndarray
            Observation variances, one per advice entry
        advice : sequence of SatelliteAdvice
            Advice in the same order

        Returns
        -------
        np.ndarray
            Scaled variances
        """
        variances = np.asarray(variances, dtype=np.float64)
        if len(advice) != variances.shape[0]:
            raise ValueError(f"{variances.shape[0]} variances for {len(advice)} satellites")
        scales = np.array([a.variance_scale for a in advice], dtype=np.float64)
        included = np.array([a.include for a in advice], dtype=bool)
        return np.where(included, variances * scales, np.inf)


__all__ = ['SatelliteAdvice', 'AdvisoryWeighting']
