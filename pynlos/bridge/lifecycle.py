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
Bridge Lifecycle
================

Owns the runtime, the classification module and the resolved entry points.

    UNINITIALIZED --initialize--> READY --shutdown--> SHUT_DOWN

A state is created once before the first epoch and shut down once after
the last. A READY state whose module failed to load is *disabled*: every
entry point is None and every decision falls back to its default.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from .entry_points import EntryPoint
from .errors import BridgeError, BridgeShutdownError, ModuleImportError, RuntimeStartError
from .runtime import CALL_LOCK, PythonRuntime, Runtime

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle phase of a BridgeState"""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SHUT_DOWN = "shut_down"


@dataclass
class BridgeState:
    """Single owner of the runtime, module and entry-point handles

    ``lock`` defaults to the process-wide CALL_LOCK shared by every state.
    """
    runtime: Optional[Runtime] = None
    module: Any = None
    entry_points: Dict[EntryPoint, Optional[Callable]] = field(
        default_factory=lambda: {ep: None for ep in EntryPoint})
    phase: Phase = Phase.UNINITIALIZED
    error: Optional[BridgeError] = None
    lock: threading.RLock = field(default=CALL_LOCK, repr=False)

    @property
    def disabled(self) -> bool:
        """True when the module could not be loaded"""
        return self.error is not None

    def available(self) -> Dict[EntryPoint, bool]:
        return {ep: handle is not None for ep, handle in self.entry_points.items()}


def is_available(state: BridgeState, entry_point: EntryPoint) -> bool:
    """True only if ``entry_point`` resolved to a callable"""
    return state.entry_points.get(entry_point) is not None


def initialize(module_name: str,
               search_paths: Sequence[str] = (),
               runtime: Optional[Runtime] = None,
               strict: bool = False) -> BridgeState:
    """
    Start the runtime, import the classification module and resolve entry points

    Parameters
    ----------
    module_name : str
        Importable name of the classification module
    search_paths : sequence of str
        Directories appended to the module resolution path
    runtime : Runtime, optional
        Runtime adapter, a new PythonRuntime when omitted
    strict : bool
        Raise the BridgeError instead of returning a disabled state

    Returns
    -------
    BridgeState
        READY state; disabled if the runtime or the import failed
    """
    runtime = runtime or PythonRuntime()
    state = BridgeState(runtime=runtime)

    try:
        runtime.start()
    except RuntimeStartError as exc:
        return _disable(state, exc, strict, started=False)

    runtime.extend_path(search_paths)

    try:
        state.module = runtime.import_module(module_name)
    except (Exception, SystemExit) as exc:
        err = ModuleImportError(module_name, f"{type(exc).__name__}: {exc}")
        return _disable(state, err, strict, started=True)

    logger.info(f"classification module '{module_name}' loaded")

    for ep in EntryPoint:
        try:
            handle = runtime.resolve(state.module, ep.value)
        except (Exception, SystemExit) as exc:
            logger.debug(f"resolving {ep} raised {type(exc).__name__}: {exc}")
            handle = None
        state.entry_points[ep] = handle
        if handle is not None:
            logger.info(f"entry point {ep} available")
        else:
            logger.info(f"entry point {ep} unavailable, using defaults")

    state.phase = Phase.READY
    return state


def _disable(state: BridgeState, error: BridgeError, strict: bool, started: bool) -> BridgeState:
    if started:
        state.runtime.finalize()
    if strict:
        raise error
    logger.info(f"advisory disabled for this run: {error}")
    state.runtime = None
    state.error = error
    state.phase = Phase.READY
    return state


def shutdown(state: BridgeState):
    """
    Release entry points, then the module, then the runtime

    Raises
    ------
    BridgeShutdownError
        If the state was already shut down
    """
    with state.lock:
        if state.phase == Phase.SHUT_DOWN:
            raise BridgeShutdownError("bridge already shut down")

        runtime = state.runtime
        for ep in EntryPoint:
            handle = state.entry_points.get(ep)
            state.entry_points[ep] = None
            if handle is not None and runtime is not None:
                runtime.release(handle)

        if state.module is not None and runtime is not None:
            runtime.release(state.module)
        state.module = None

        if runtime is not None:
            runtime.finalize()
        state.runtime = None

        state.phase = Phase.SHUT_DOWN
        logger.trace("bridge shut down")


__all__ = ['Phase', 'BridgeState', 'is_available', 'initialize', 'shutdown']
