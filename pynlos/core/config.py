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
Advisory Configuration Overlay
==============================

Environment overrides read once at startup. The positioning engine reads
these fields to decide whether to query the classification engine at all
and how to apply its answers:

=============  ======  ==========================================  =========
Variable       Type    Meaning                                     Default
=============  ======  ==========================================  =========
``NLOS_ENV``   int     1 excludes NLOS satellites                  included
``VARR_ENV``   int     variance scaling mode, 0 is traditional     0
``VS``         int     >0 enables virtual satellite handling       off
``K_COFF``     float   scale applied to NLOS coefficients          1.0
``AR_MODES``   int     0 AR includes NLOS, 1 AR excludes NLOS      0
=============  ======  ==========================================  =========
"""

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Mapping, Optional

from .constants import (
    ENV_NLOS, ENV_VARR, ENV_VS, ENV_K_COFF, ENV_AR_MODES,
    DEFAULT_K_COEFFICIENT, DEFAULT_VARIANCE_MODE
)

logger = logging.getLogger(__name__)


class ArMode(IntEnum):
    """Participation of NLOS satellites in ambiguity resolution"""
    INCLUDE_NLOS = 0
    EXCLUDE_NLOS = 1


class VarianceMode(IntEnum):
    """Variance scaling modes selected by ``VARR_ENV``"""
    TRADITIONAL = 0   # elevation model only, coefficient not queried
    COEFFICIENT = 1   # variance multiplied by the coefficient
    SCALED = 2        # NLOS coefficients multiplied by K_COFF


@dataclass(frozen=True)
class EnvOverride:
    """One environment override: raw string, parsed value, presence"""
    raw: Optional[str]
    value: Any
    is_set: bool = False


@dataclass(frozen=True)
class AdvisoryConfig:
    """Immutable set of advisory overrides"""
    nlos_exclude: EnvOverride = field(default_factory=lambda: EnvOverride(None, False))
    variance_mode: EnvOverride = field(
        default_factory=lambda: EnvOverride(None, VarianceMode(DEFAULT_VARIANCE_MODE)))
    virtual_sat_mode: EnvOverride = field(default_factory=lambda: EnvOverride(None, False))
    k_coefficient: EnvOverride = field(
        default_factory=lambda: EnvOverride(None, DEFAULT_K_COEFFICIENT))
    ar_mode: EnvOverride = field(default_factory=lambda: EnvOverride(None, ArMode.INCLUDE_NLOS))

    @property
    def exclude_nlos(self) -> bool:
        return self.nlos_exclude.value

    @property
    def variance(self) -> VarianceMode:
        return self.variance_mode.value

    @property
    def handle_virtual(self) -> bool:
        return self.virtual_sat_mode.value

    @property
    def k(self) -> float:
        return self.k_coefficient.value

    @property
    def ar(self) -> ArMode:
        return self.ar_mode.value


def _atoi(raw: str) -> int:
    """Integer parse tolerating whitespace and float-looking input"""
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        return int(float(text))


def _atof(raw: str) -> float:
    return float(raw.strip())


def _read(environ: Mapping[str, str], name: str, default: Any,
          parse: Callable[[str], Any],
          accept: Callable[[Any], bool] = lambda value: True) -> EnvOverride:
    raw = environ.get(name)
    if raw is None:
        return EnvOverride(None, default, False)
    try:
        value = parse(raw)
    except (ValueError, OverflowError):
        logger.warning(f"{name}={raw!r} cannot be parsed, using default {default!r}")
        return EnvOverride(raw, default, True)
    if not accept(value):
        logger.warning(f"{name}={raw!r} is out of range, using default {default!r}")
        return EnvOverride(raw, default, True)
    return EnvOverride(raw, value, True)


def load_from_environment(environ: Optional[Mapping[str, str]] = None) -> AdvisoryConfig:
    """
    Read the five advisory overrides

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Environment to read, ``os.environ`` when omitted

    Returns
    -------
    AdvisoryConfig
        Parsed overrides; unset or invalid variables keep their defaults
    """
    if environ is None:
        environ = os.environ

    return AdvisoryConfig(
        nlos_exclude=_read(environ, ENV_NLOS, False,
                           lambda raw: _atoi(raw) == 1),
        variance_mode=_read(environ, ENV_VARR, VarianceMode(DEFAULT_VARIANCE_MODE),
                            lambda raw: VarianceMode(_atoi(raw))),
        virtual_sat_mode=_read(environ, ENV_VS, False,
                               lambda raw: _atoi(raw) > 0),
        k_coefficient=_read(environ, ENV_K_COFF, DEFAULT_K_COEFFICIENT, _atof,
                            accept=lambda value: value > 0 and value != float('inf')),
        ar_mode=_read(environ, ENV_AR_MODES, ArMode.INCLUDE_NLOS,
                      lambda raw: ArMode(_atoi(raw))),
    )


def log_config(config: AdvisoryConfig, log: Optional[logging.Logger] = None):
    """Write the startup summary of the active overrides"""
    log = log or logger

    if config.exclude_nlos:
        log.info(f"[nlos_val]: {config.nlos_exclude.raw} NLOS sats excluded")
    else:
        log.info(f"[nlos_val]: {config.nlos_exclude.raw or 0} NLOS sats included")

    if config.variance == VarianceMode.TRADITIONAL:
        log.info("traditional varr")
    else:
        log.info(f"[varr_val]: {int(config.variance)} ({config.variance.name.lower()})")

    log.info(f"[k_val]: {config.k:.1f}")
    log.info(f"[vs_val]: {int(config.handle_virtual)}")

    if config.ar == ArMode.INCLUDE_NLOS:
        log.info("AR including NLOS")
    else:
        log.info("AR excluding NLOS")


__all__ = ['ArMode', 'VarianceMode', 'EnvOverride', 'AdvisoryConfig',
           'load_from_environment', 'log_config']
