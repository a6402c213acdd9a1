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

"""Runtime adapters hosting the classification module

The bridge never touches the module loading mechanism directly. It talks to
a ``Runtime``, which knows how to start, find and import a module, resolve a
callable by name, call it, and release what the call returned.
``PythonRuntime`` loads the module in-process with :mod:`importlib`; tests
substitute a runtime that counts acquisitions and releases.
"""

import importlib
import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from .errors import RuntimeStartError

# Serialises every call into a classification engine, whichever state issues it
CALL_LOCK = threading.RLock()

# PythonRuntime currently started in this process
_active_runtime: Optional["PythonRuntime"] = None
_active_guard = threading.Lock()


class Runtime(ABC):
    """Loading and calling mechanism for a classification module"""

    @abstractmethod
    def start(self):
        """Start the runtime; raises RuntimeStartError on failure"""

    @abstractmethod
    def extend_path(self, search_paths: Sequence[str]):
        """Append directories to the module resolution path"""

    @abstractmethod
    def import_module(self, module_name: str) -> Any:
        """Import and return the module handle"""

    @abstractmethod
    def resolve(self, module: Any, name: str) -> Optional[Callable]:
        """Return the callable called ``name`` on ``module``, or None"""

    @abstractmethod
    def call(self, handle: Callable, args: Sequence) -> Any:
        """Call ``handle`` and return an owned result object"""

    @abstractmethod
    def release(self, obj: Any):
        """Release an owned object (call result or handle)"""

    @abstractmethod
    def finalize(self):
        """Stop the runtime; it cannot be started again"""


class PythonRuntime(Runtime):
    """In-process runtime backed by :mod:`importlib`

    Results are ordinary Python objects, so ``release`` only drops the
    reference held by the caller. Directories added with ``extend_path`` are
    removed from ``sys.path`` again on ``finalize``.

    One PythonRuntime is started per process: ``start`` raises
    RuntimeStartError while another instance is started and not finalized.
    """

    def __init__(self):
        self.started = False
        self.finalized = False
        self._added_paths: List[str] = []

    def start(self):
        if self.finalized:
            raise RuntimeStartError("runtime was finalized and cannot be restarted")
        if self.started:
            raise RuntimeStartError("runtime already started")
        global _active_runtime
        with _active_guard:
            if _active_runtime is not None:
                raise RuntimeStartError("another runtime is already started in this process")
            _active_runtime = self
        self.started = True

    def extend_path(self, search_paths: Sequence[str]):
        for path in search_paths:
            path = str(path)
            if path not in sys.path:
                sys.path.append(path)
                self._added_paths.append(path)

    def import_module(self, module_name: str) -> Any:
        # Pick up directories created after interpreter start
        importlib.invalidate_caches()
        return importlib.import_module(module_name)

    def resolve(self, module: Any, name: str) -> Optional[Callable]:
        handle = getattr(module, name, None)
        if handle is None or not callable(handle):
            return None
        return handle

    def call(self, handle: Callable, args: Sequence) -> Any:
        return handle(*args)

    def release(self, obj: Any):
        pass

    def finalize(self):
        global _active_runtime
        for path in self._added_paths:
            if path in sys.path:
                sys.path.remove(path)
        self._added_paths = []
        with _active_guard:
            if _active_runtime is self:
                _active_runtime = None
        self.started = False
        self.finalized = True


__all__ = ['Runtime', 'PythonRuntime', 'CALL_LOCK']
