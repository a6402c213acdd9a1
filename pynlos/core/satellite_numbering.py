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

"""Unified satellite numbering and satellite id strings.

The positioning engine identifies satellites by an internal number while the
classification engine is queried with RINEX style id strings (``"G05"``,
``"R12"``, ``"E01"``). This module converts between the two.

The satellite number ranges are:
- GPS (G): 1-32
- SBAS (S): 33-64, 133-140
- GLONASS (R): 65-88
- Galileo (E): 97-132
- BeiDou (C): 141-203
- QZSS (J): 210-216
- IRNSS (I): 230-243
"""

import re

from .constants import (
    SYS_NONE, SYS_GPS, SYS_GLO, SYS_GAL, SYS_BDS, SYS_QZS, SYS_SBS, SYS_IRN
)

# Define satellite number ranges for each system
SATELLITE_RANGES = {
    SYS_GPS: [(1, 32)],                    # GPS: 1-32
    SYS_SBS: [(33, 64), (133, 140)],      # SBAS: 33-64, 133-140
    SYS_GLO: [(65, 88)],                   # GLONASS: 65-88
    SYS_GAL: [(97, 132)],                  # Galileo: 97-132
    SYS_BDS: [(141, 203)],                 # BeiDou: 141-203
    SYS_QZS: [(210, 216)],                 # QZSS: 210-216
    SYS_IRN: [(230, 243)],                 # IRNSS: 230-243
}

# System ID to character mapping
SYS_TO_CHAR = {
    SYS_GPS: 'G',
    SYS_GLO: 'R',
    SYS_GAL: 'E',
    SYS_BDS: 'C',
    SYS_QZS: 'J',
    SYS_SBS: 'S',
    SYS_IRN: 'I',
}

# Character to system ID mapping
CHAR_TO_SYS = {v: k for k, v in SYS_TO_CHAR.items()}

_SAT_ID_PATTERN = re.compile(r'^\s*([A-Za-z]?)\s*(\d{1,3})\s*$')


def prn_to_sat(system_char, prn):
    """Convert system character and PRN to internal satellite number.

    Parameters
    ----------
    system_char : str
        Single character system identifier (G, R, E, C, J, S, I)
    prn : int
        PRN number within the constellation

    Returns
    -------
    int
        Internal satellite number (1-255), or 0 if invalid PRN or system

    Examples
    --------
    >>> prn_to_sat('G', 1)
    1
    >>> prn_to_sat('R', 1)
    65
    >>> prn_to_sat('X', 1)
    0
    """
    if system_char == 'G':  # GPS
        if 1 <= prn <= 32:
            return prn
    elif system_char == 'R':  # GLONASS
        if 1 <= prn <= 24:
            return prn + 64
    elif system_char == 'E':  # Galileo
        if 1 <= prn <= 36:
            return prn + 96
    elif system_char == 'C':  # BeiDou (BDS-2: 1-37, BDS-3: 38-63)
        if 1 <= prn <= 63:
            return prn + 140
    elif system_char == 'J':  # QZSS
        if 1 <= prn <= 7:
            return prn + 209
    elif system_char == 'S':  # SBAS
        if 120 <= prn <= 151:
            return prn - 87
        elif 152 <= prn <= 159:
            return prn - 19
    elif system_char == 'I':  # IRNSS
        if 1 <= prn <= 14:
            return prn + 229

    return 0  # Invalid


def sat_to_prn(sat):
    """Convert internal satellite number to constellation-specific PRN.

    Returns 0 for an invalid satellite number.
    """
    if sat <= 0 or sat > 255:
        return 0
    elif 1 <= sat <= 32:  # GPS
        return sat
    elif 33 <= sat <= 64:  # SBAS
        return sat - 33 + 120
    elif 65 <= sat <= 88:  # GLONASS
        return sat - 64
    elif 97 <= sat <= 132:  # Galileo
        return sat - 96
    elif 133 <= sat <= 140:  # SBAS
        return sat - 133 + 152
    elif 141 <= sat <= 203:  # BeiDou
        return sat - 140
    elif 210 <= sat <= 216:  # QZSS
        return sat - 209
    elif 230 <= sat <= 243:  # IRNSS
        return sat - 229
    else:
        return 0


def sat2sys(sat):
    """Get satellite system from satellite number"""
    if sat <= 0 or sat > 255:
        return SYS_NONE

    for sys_id, ranges in SATELLITE_RANGES.items():
        for start, end in ranges:
            if start <= sat <= end:
                return sys_id

    return SYS_NONE


def sys2char(sys):
    """Convert system ID to character"""
    return SYS_TO_CHAR.get(sys, ' ')


def char2sys(c):
    """Convert character to system ID"""
    return CHAR_TO_SYS.get(c.upper(), SYS_NONE)


def sat2id(sat):
    """Convert internal satellite number to a satellite id string.

    SBAS satellites are written as their three digit PRN (``"120"``), every
    other system as system character plus two digit PRN (``"G05"``).

    Parameters
    ----------
    sat : int
        Internal satellite number

    Returns
    -------
    str
        Satellite id, or an empty string for an invalid number

    Examples
    --------
    >>> sat2id(5)
    'G05'
    >>> sat2id(76)
    'R12'
    """
    sys = sat2sys(sat)
    if sys == SYS_NONE:
        return ''
    prn = sat_to_prn(sat)
    if sys == SYS_SBS:
        return f"{prn:03d}"
    return f"{sys2char(sys)}{prn:02d}"


def id2sat(sat_id):
    """Convert a satellite id string to internal satellite number.

    Accepts ``"G05"``, ``"g5"``, ``"R12"`` and bare numbers. Bare numbers
    from 1 to 32 are GPS and from 120 to 159 are SBAS, as in RINEX 2.

    Returns
    -------
    int
        Internal satellite number, or 0 if the id cannot be parsed
    """
    match = _SAT_ID_PATTERN.match(sat_id or '')
    if not match:
        return 0
    system_char, prn = match.group(1).upper(), int(match.group(2))
    if not system_char:
        system_char = 'S' if prn >= 100 else 'G'
    return prn_to_sat(system_char, prn)


__all__ = ['SATELLITE_RANGES', 'SYS_TO_CHAR', 'CHAR_TO_SYS', 'prn_to_sat',
           'sat_to_prn', 'sat2sys', 'sys2char', 'char2sys', 'sat2id', 'id2sat']
