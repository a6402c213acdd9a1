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

"""Core components of the advisory bridge.

- **Constants**: entry-point names, environment variable names and the safe
  defaults applied when the classification engine cannot answer
- **Time**: GPS week / time-of-week handling for query keys
- **Satellite numbering**: conversion between internal satellite numbers and
  satellite id strings such as ``"G05"``
- **Configuration**: the environment override layer read once at startup

Example Usage:
    >>> from pynlos.core import load_from_environment, sat2id, GNSSTime
    >>> config = load_from_environment({'NLOS_ENV': '1'})
    >>> config.exclude_nlos
    True
    >>> sat2id(5)
    'G05'
"""

from .constants import *
from .time import *
from .satellite_numbering import *
from .config import *
