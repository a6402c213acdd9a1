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
pynlos - NLOS advisory bridge for RTK positioning

Lets an RTK positioning engine ask an external satellite classification
module, per satellite and epoch, whether a signal is NLOS, whether it is a
virtual satellite and how much its variance should be scaled. Every failure
of the classification module degrades to a safe default so a positioning
run is never aborted by the advisory layer.
"""

__version__ = "1.0.0"
__author__ = "PyNLOS Development Team"
__title__ = "pynlos"
__description__ = "NLOS advisory bridge for RTK positioning"

from . import logger
from .core import *
from .bridge import *
from .rtk import *
