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

"""Exceptions raised and reported by the advisory bridge

Two families:

- ``BridgeError`` is raised. It covers the runtime failing to start, the
  classification module failing to import, and any use of the bridge after
  it has been shut down.
- ``CallError`` is never raised past the call marshaler. It is returned as
  part of a ``CallResult`` and mapped to a safe default by the facade.
"""


class BridgeError(Exception):
    """Base class for bridge lifecycle errors"""


class RuntimeStartError(BridgeError):
    """The runtime could not be started (or was started twice)"""


class ModuleImportError(BridgeError):
    """The classification module could not be imported"""

    def __init__(self, module_name: str, reason: str):
        super().__init__(f"cannot import classification module '{module_name}': {reason}")
        self.module_name = module_name
        self.reason = reason


class BridgeShutdownError(BridgeError, RuntimeError):
    """The bridge was used after shutdown or before it was ready"""


class CallError(Exception):
    """A single call into the classification engine did not yield a value"""

    def __init__(self, entry_point, reason: str):
        super().__init__(f"{entry_point}: {reason}")
        self.entry_point = entry_point
        self.reason = reason


class ResolutionUnavailable(CallError):
    """The entry point is missing from the module or is not callable"""


class CallFailed(CallError):
    """The call raised, or returned something outside the expected domain"""


__all__ = ['BridgeError', 'RuntimeStartError', 'ModuleImportError',
           'BridgeShutdownError', 'CallError', 'ResolutionUnavailable',
           'CallFailed']
