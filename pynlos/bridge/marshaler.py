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
Call Marshaler
==============

Invokes one resolved entry point with primitive arguments and converts the
returned object to a native primitive.

Every object returned by a successful call is owned by the marshaler and
released through the runtime exactly once, on every exit path including a
failed conversion. No error escapes ``invoke``; failures come back as a
``CallResult`` carrying a ``CallError``.
"""

import operator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from .entry_points import EntryPoint
from .errors import BridgeShutdownError, CallError, CallFailed, ResolutionUnavailable
from .lifecycle import BridgeState, Phase

PRIMITIVE_TYPES = (str, int, float)


class ResultKind(Enum):
    """Native type expected back from an entry point"""
    INT = "int"
    FLOAT = "float"
    ANY = "any"


@dataclass(frozen=True)
class CallResult:
    """Outcome of one marshaled call"""
    value: Any = None
    error: Optional[CallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_int(obj: Any) -> int:
    """Convert through the index protocol (ints, bools, numpy integers)"""
    return operator.index(obj)


def to_float(obj: Any) -> float:
    """Convert through the float protocol, rejecting text"""
    if isinstance(obj, (str, bytes, bytearray)):
        raise TypeError(f"expected a number, got {type(obj).__name__}")
    return float(obj)


_CONVERTERS = {
    ResultKind.INT: to_int,
    ResultKind.FLOAT: to_float,
    ResultKind.ANY: lambda obj: obj,
}


@contextmanager
def owned_result(runtime, obj):
    """Scope-bound owner releasing ``obj`` once when the block exits"""
    try:
        yield obj
    finally:
        runtime.release(obj)


class CallMarshaler:
    """Synchronous calls into the classification engine"""

    def __init__(self, state: BridgeState):
        self.state = state

    def invoke(self, entry_point: EntryPoint, args: Sequence = (),
               kind: ResultKind = ResultKind.ANY) -> CallResult:
        """
        Call ``entry_point`` with ``args`` and convert the result

        Parameters
        ----------
        entry_point : EntryPoint
            Entry point to call
        args : sequence
            Positional arguments; str, int and float only
        kind : ResultKind
            Native type the result is converted to

        Returns
        -------
        CallResult
            Converted value, or the error that prevented one

        Raises
        ------
        BridgeShutdownError
            If the bridge is not READY
        """
        state = self.state
        if state.phase != Phase.READY:
            raise BridgeShutdownError(
                f"{entry_point} called while bridge is {state.phase.value}")

        handle = state.entry_points.get(entry_point)
        if handle is None:
            return CallResult(error=ResolutionUnavailable(entry_point, "not resolved"))

        for arg in args:
            if not isinstance(arg, PRIMITIVE_TYPES):
                return CallResult(error=CallFailed(
                    entry_point, f"unsupported argument type {type(arg).__name__}"))

        convert = _CONVERTERS[kind]
        with state.lock:
            try:
                raw = state.runtime.call(handle, tuple(args))
            except (Exception, SystemExit) as exc:
                return CallResult(error=CallFailed(
                    entry_point, f"call raised {type(exc).__name__}: {exc}"))

            with owned_result(state.runtime, raw) as obj:
                try:
                    value = convert(obj)
                except (Exception, SystemExit) as exc:
                    return CallResult(error=CallFailed(
                        entry_point, f"cannot convert {type(obj).__name__} to {kind.value}: {exc}"))

        return CallResult(value=value)


__all__ = ['ResultKind', 'CallResult', 'CallMarshaler', 'owned_result', 'to_int', 'to_float']
