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

"""Test helpers: an instrumented runtime and throwaway classification modules"""

import textwrap
import uuid
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Sequence

from .bridge.errors import RuntimeStartError
from .bridge.runtime import Runtime


class CountingRuntime(Runtime):
    """
    In-memory runtime counting every acquisition and release

    Parameters
    ----------
    modules : dict
        Module name to module object (any attribute container); names not in
        the mapping fail to import
    fail_start : bool
        Make ``start`` raise RuntimeStartError
    """

    def __init__(self, modules: Optional[Dict[str, Any]] = None, fail_start: bool = False):
        self.modules = modules or {}
        self.fail_start = fail_start
        self.starts = 0
        self.finalizes = 0
        self.search_paths: List[str] = []
        self.calls: List[tuple] = []
        self.acquired = 0
        self.released = 0
        self.released_handles: List[Any] = []
        self._handles: List[Any] = []

    @property
    def outstanding(self) -> int:
        """Results acquired but not yet released"""
        return self.acquired - self.released

    def start(self):
        if self.fail_start:
            raise RuntimeStartError("runtime refused to start")
        if self.starts:
            raise RuntimeStartError("runtime already started")
        self.starts += 1

    def extend_path(self, search_paths: Sequence[str]):
        self.search_paths.extend(str(p) for p in search_paths)

    def import_module(self, module_name: str) -> Any:
        if module_name not in self.modules:
            raise ImportError(f"No module named '{module_name}'")
        module = self.modules[module_name]
        self._handles.append(module)
        return module

    def resolve(self, module: Any, name: str) -> Optional[Callable]:
        handle = getattr(module, name, None)
        if handle is None or not callable(handle):
            return None
        self._handles.append(handle)
        return handle

    def call(self, handle: Callable, args: Sequence) -> Any:
        self.calls.append((getattr(handle, '__name__', repr(handle)), tuple(args)))
        result = handle(*args)
        self.acquired += 1
        return result

    def release(self, obj: Any):
        if any(obj is h for h in self._handles):
            self.released_handles.append(obj)
        else:
            self.released += 1

    def finalize(self):
        self.finalizes += 1


def engine(**functions) -> SimpleNamespace:
    """Module-like object exposing the given functions"""
    return SimpleNamespace(**functions)


def write_classification_module(directory, source: str, name: Optional[str] = None) -> str:
    """
    Write a classification module into ``directory``

    Returns the module name, unique per call unless ``name`` is given.
    """
    name = name or f"asset_{uuid.uuid4().hex[:12]}"
    path = Path(directory) / f"{name}.py"
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return name
