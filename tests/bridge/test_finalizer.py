#!/usr/bin/env python3
"""Test suite for finalize() and advisory_session()"""

import unittest

from pynlos.bridge.errors import BridgeShutdownError
from pynlos.bridge.facade import SatelliteQueryKey
from pynlos.bridge.finalizer import advisory_session, finalize
from pynlos.bridge.lifecycle import Phase, initialize
from pynlos.testing import CountingRuntime, engine


class TestFinalize(unittest.TestCase):
    """Test finalize()"""

    def test_save_info_called_then_shutdown(self):
        saved = []
        runtime = CountingRuntime({'asset': engine(save_info=lambda: saved.append(True) or "ignored")})
        state = initialize('asset', runtime=runtime)

        finalize(state)

        self.assertEqual(saved, [True])
        self.assertEqual(runtime.calls, [('<lambda>', ())])
        self.assertEqual(runtime.outstanding, 0)
        self.assertEqual(state.phase, Phase.SHUT_DOWN)
        self.assertEqual(runtime.finalizes, 1)

    def test_save_info_absent(self):
        runtime = CountingRuntime({'asset': engine(check_sat=lambda sat_id, week, tow: 1)})
        state = initialize('asset', runtime=runtime)

        finalize(state)

        self.assertEqual(runtime.calls, [])
        self.assertEqual(runtime.finalizes, 1)
        self.assertEqual(state.phase, Phase.SHUT_DOWN)

    def test_save_info_failure_is_ignored(self):
        def save_info():
            raise IOError("disk full")

        runtime = CountingRuntime({'asset': engine(save_info=save_info)})
        state = initialize('asset', runtime=runtime)

        with self.assertLogs('pynlos.bridge.finalizer', level='INFO') as captured:
            finalize(state)

        self.assertIn("disk full", captured.output[0])
        self.assertEqual(state.phase, Phase.SHUT_DOWN)
        self.assertEqual(runtime.finalizes, 1)

    def test_finalize_disabled_state(self):
        runtime = CountingRuntime({})
        state = initialize('asset', runtime=runtime)
        finalize(state)
        self.assertEqual(state.phase, Phase.SHUT_DOWN)
        # Finalized once, when the import failed
        self.assertEqual(runtime.finalizes, 1)

    def test_finalize_twice(self):
        state = initialize('asset', runtime=CountingRuntime({'asset': engine()}))
        finalize(state)
        with self.assertRaises(BridgeShutdownError):
            finalize(state)


class TestAdvisorySession(unittest.TestCase):
    """Test advisory_session()"""

    def test_session(self):
        saved = []
        runtime = CountingRuntime({'asset': engine(
            check_sat=lambda sat_id, week, tow: 1,
            save_info=lambda: saved.append(True),
        )})
        with advisory_session('asset', runtime=runtime) as (state, facade):
            self.assertTrue(facade.is_nlos(SatelliteQueryKey('G05', 2200, 345600)))
        self.assertEqual(saved, [True])
        self.assertEqual(state.phase, Phase.SHUT_DOWN)

    def test_session_finalizes_on_error(self):
        runtime = CountingRuntime({'asset': engine()})
        with self.assertRaises(ZeroDivisionError):
            with advisory_session('asset', runtime=runtime) as (state, facade):
                1 / 0
        self.assertEqual(state.phase, Phase.SHUT_DOWN)
        self.assertEqual(runtime.finalizes, 1)


if __name__ == '__main__':
    unittest.main()
