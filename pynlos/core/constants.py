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

"""Constants shared by the advisory bridge and its consumers"""

# GNSS System IDs
SYS_NONE = 0x00   # Invalid
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # IRNSS
SYS_ALL = 0xFF    # All systems

# Time System Parameters
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch
WEEK_SECONDS = 604800          # seconds per GPS week

# ============================================================================
# CLASSIFICATION MODULE
# ============================================================================
DEFAULT_ADVISORY_MODULE = "asset"   # module imported by the host program

ENTRY_CHECK_SAT = "check_sat"     # (id, week, tow) -> int, NLOS flag
ENTRY_CHECK_VS = "check_vs"       # (id, week, tow) -> int, virtual satellite flag
ENTRY_STORE_INFO = "store_info"   # (week, tow, key, value) -> int, acknowledgement
ENTRY_SAVE_INFO = "save_info"     # () -> any, flush/persist
ENTRY_GET_VAL = "get_val"         # (id, week, tow) -> float, quality coefficient

# ============================================================================
# ENVIRONMENT OVERRIDES
# ============================================================================
ENV_NLOS = "NLOS_ENV"      # 1: exclude NLOS satellites
ENV_VARR = "VARR_ENV"      # variance scaling mode (0: traditional)
ENV_VS = "VS"              # >0: virtual satellite handling
ENV_K_COFF = "K_COFF"      # coefficient scale
ENV_AR_MODES = "AR_MODES"  # 0: AR includes NLOS, 1: AR excludes NLOS

# ============================================================================
# SAFE DEFAULTS
# ============================================================================
DEFAULT_COEFFICIENT = 1.0   # line-of-sight, no variance scaling
DEFAULT_K_COEFFICIENT = 1.0
DEFAULT_VARIANCE_MODE = 0   # traditional variance model
