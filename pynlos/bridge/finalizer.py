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

"""End-of-run flush and teardown"""

import logging
from contextlib import contextmanager
from typing import Optional, Sequence

from .entry_points import EntryPoint
from .errors import BridgeShutdownError
from .facade import DecisionFacade
from .lifecycle import BridgeState, Phase, initialize, is_available, shutdown
from .marshaler import CallMarshaler
from .policy import condition_of, fallback_for
from .runtime import Runtime

logger = logging.getLogger(__name__)


def finalize(state: BridgeState):
    """
    Call save_info (if resolved) and shut the bridge down

    The return value of save_info is ignored and its failure is only
    logged. Runs once; a second call raises BridgeShutdownError.
    """
    if state.phase == Phase.SHUT_DOWN:
        raise BridgeShutdownError("finalize called twice")

    if state.phase == Phase.READY and is_available(state, EntryPoint.SAVE_INFO):
        call = CallMarshaler(state).invoke(EntryPoint.SAVE_INFO, ())
        if call.ok:
            logger.info("save_info done")
        else:
            rule = fallback_for(EntryPoint.SAVE_INFO, condition_of(call.error))
            logger.log(rule.level, f"save_info failed: {call.error.reason}")
    else:
        logger.info("save_info unavailable, nothing to persist")

    shutdown(state)


@contextmanager
def advisory_session(module_name: str,
                     search_paths: Sequence[str] = (),
                     runtime: Optional[Runtime] = None,
                     observer=None):
    """
    Initialize the bridge, yield ``(state, facade)``, finalize on exit

    Finalization runs whether the body returns or raises.
    """
    state = initialize(module_name, search_paths, runtime=runtime)
    try:
        yield state, DecisionFacade(state, observer=observer)
    finally:
        finalize(state)


__all__ = ['finalize', 'advisory_session']
