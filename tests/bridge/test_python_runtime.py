#!/usr/bin/env python3
"""Test suite for the in-process runtime with real classification modules"""

import sys
import tempfile
import unittest

from pynlos.bridge.entry_points import EntryPoint
from pynlos.bridge.errors import RuntimeStartError
from pynlos.bridge.facade import DecisionFacade, SatelliteQueryKey
from pynlos.bridge.finalizer import finalize
from pynlos.bridge.lifecycle import initialize, is_available
from pynlos.bridge.runtime import PythonRuntime
from pynlos.core.time import GNSSTime
from pynlos.testing import write_classification_module

CLASSIFIER = """
NLOS = {("G05", 2200, 345600)}
STORED = []
SAVED = []

def check_sat(sat_id, week, tow):
    return 1 if (sat_id, week, tow) in NLOS else 0

def get_val(sat_id, week, tow):
    return 4.0 if (sat_id, week, tow) in NLOS else 1.0

def store_info(week, tow, key, value):
    STORED.append((week, tow, key, value))
    return len(STORED)

def save_info():
    SAVED.append(len(STORED))

check_vs = "not callable"
"""


class TestPythonRuntime(unittest.TestCase):
    """Test PythonRuntime"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_end_to_end(self):
        name = write_classification_module(self.tmpdir.name, CLASSIFIER)
        state = initialize(name, [self.tmpdir.name])
        module = state.module
        facade = DecisionFacade(state)

        self.assertFalse(is_available(state, EntryPoint.CHECK_VS))
        key = SatelliteQueryKey('G05', 2200, 345600)
        self.assertTrue(facade.is_nlos(key))
        self.assertEqual(facade.get_coefficient(key), 4.0)
        self.assertFalse(facade.is_virtual_satellite(key))
        self.assertFalse(facade.is_nlos(SatelliteQueryKey('G06', 2200, 345600)))
        self.assertTrue(facade.store_info(GNSSTime(2200, 345600.5), 'fix', '1'))

        finalize(state)

        self.assertEqual(module.STORED, [(2200, 345600.5, 'fix', '1')])
        self.assertEqual(module.SAVED, [1])
        self.assertNotIn(self.tmpdir.name, sys.path)

    def test_module_absent(self):
        state = initialize('pynlos_no_such_classifier', [self.tmpdir.name])
        facade = DecisionFacade(state)

        self.assertTrue(state.disabled)
        self.assertFalse(facade.is_nlos(SatelliteQueryKey('G01', 2200, 345600)))
        self.assertEqual(facade.get_coefficient(SatelliteQueryKey('G01', 2200, 345600)), 1.0)
        finalize(state)

    def test_module_raising_on_import(self):
        name = write_classification_module(self.tmpdir.name, "raise RuntimeError('bad model file')\n")
        state = initialize(name, [self.tmpdir.name])
        self.assertTrue(state.disabled)
        self.assertIn('bad model file', str(state.error))
        self.assertNotIn(self.tmpdir.name, sys.path)

    def test_one_runtime_per_process(self):
        name = write_classification_module(self.tmpdir.name, CLASSIFIER)
        first = initialize(name, [self.tmpdir.name])
        second = initialize(name, [self.tmpdir.name])

        self.assertFalse(first.disabled)
        self.assertTrue(second.disabled)
        self.assertIsInstance(second.error, RuntimeStartError)
        self.assertIs(first.lock, second.lock)
        self.assertTrue(DecisionFacade(first).is_nlos(SatelliteQueryKey('G05', 2200, 345600)))
        self.assertFalse(DecisionFacade(second).is_nlos(SatelliteQueryKey('G05', 2200, 345600)))

        finalize(second)
        finalize(first)

        third = initialize(name, [self.tmpdir.name])
        self.assertFalse(third.disabled)
        finalize(third)

    def test_module_exiting_on_import(self):
        name = write_classification_module(self.tmpdir.name, "import sys\nsys.exit(2)\n")
        state = initialize(name, [self.tmpdir.name])
        self.assertTrue(state.disabled)
        self.assertIn('SystemExit', str(state.error))
        finalize(state)

    def test_module_getattr_raising(self):
        source = """
        def check_sat(sat_id, week, tow):
            return 1

        def __getattr__(name):
            raise RuntimeError(f"lazy attribute {name} failed")
        """
        name = write_classification_module(self.tmpdir.name, source)
        state = initialize(name, [self.tmpdir.name])

        self.assertFalse(state.disabled)
        self.assertTrue(is_available(state, EntryPoint.CHECK_SAT))
        self.assertFalse(is_available(state, EntryPoint.GET_VAL))
        self.assertEqual(DecisionFacade(state).get_coefficient(SatelliteQueryKey('G05', 2200, 345600)), 1.0)
        finalize(state)

    def test_no_restart_after_finalize(self):
        runtime = PythonRuntime()
        runtime.start()
        runtime.finalize()
        with self.assertRaises(RuntimeStartError):
            runtime.start()


if __name__ == '__main__':
    unittest.main()
