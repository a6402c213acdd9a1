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

"""Advisory bridge to an external satellite classification engine

Lifecycle:

    state = initialize("asset", search_paths)
    facade = DecisionFacade(state)
    ...                                  # per satellite per epoch
    finalize(state)                      # save_info, then shutdown
"""

from .errors import *
from .entry_points import *
from .runtime import *
from .lifecycle import *
from .marshaler import *
from .policy import *
from .facade import *
from .finalizer import *
