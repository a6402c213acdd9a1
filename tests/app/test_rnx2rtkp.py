#!/usr/bin/env python3
"""Test suite for the rnx2rtkp host program"""

import logging
import os
import unittest

import numpy as np

from pynlos.app.rnx2rtkp import (PMODE_KINEMA, build_parser, default_processing_options,
                                 load_engine, main, options_from_args, parse_epoch,
                                 parse_navsys, run)
from pynlos.core.constants import SYS_BDS, SYS_GLO, SYS_GPS
from pynlos.core.time import GNSSTime
from pynlos.rtk.advisory_weighting import AdvisoryWeighting
from pynlos.rtk.recorder import DecisionRecorder
from pynlos.testing import CountingRuntime, engine


class FakePositioning:
    """Positioning engine stand-in asking for advice on two satellites"""

    def __init__(self, status=0, error=None):
        self.status = status
        self.error = error
        self.args = None
        self.advice = None

    def __call__(self, *args, advisor=None):
        self.args = args
        self.advice = advisor.advise_epoch(['G05', 'G07'], GNSSTime(2200, 345600.0))
        if self.error is not None:
            raise self.error
        return self.status


def classifier(saved):
    return engine(
        check_sat=lambda sat_id, week, tow: 1 if sat_id == 'G05' else 0,
        save_info=lambda: saved.append(True),
    )


class TestRun(unittest.TestCase):
    """Bridge lifecycle around the positioning run"""

    def setUp(self):
        self.saved = []
        self.runtime = CountingRuntime({'asset': classifier(self.saved)})

    def test_run(self):
        positioning = FakePositioning(status=0)
        status = run(positioning, input_files=['rover.obs', 'nav.rnx'], output_file='out.pos',
                     environ={'NLOS_ENV': '1'}, runtime=self.runtime)

        self.assertEqual(status, 0)
        self.assertFalse(positioning.advice['G05'].include)
        self.assertTrue(positioning.advice['G07'].include)
        self.assertEqual(positioning.args[6], ['rover.obs', 'nav.rnx'])
        self.assertEqual(positioning.args[3]['mode'], PMODE_KINEMA)
        self.assertEqual(self.saved, [True])
        self.assertEqual(self.runtime.finalizes, 1)
        self.assertEqual(self.runtime.outstanding, 0)

    def test_working_directory_searched_first(self):
        run(FakePositioning(), search_paths=['/opt/gnss_analyze'], environ={},
            runtime=self.runtime)
        self.assertEqual(self.runtime.search_paths, [os.getcwd(), '/opt/gnss_analyze'])

    def test_finalized_when_engine_raises(self):
        positioning = FakePositioning(error=RuntimeError('no observation data'))
        with self.assertRaises(RuntimeError):
            run(positioning, environ={}, runtime=self.runtime)

        self.assertEqual(self.saved, [True])
        self.assertEqual(self.runtime.finalizes, 1)

    def test_module_absent(self):
        runtime = CountingRuntime({})
        positioning = FakePositioning(status=1)
        status = run(positioning, environ={'NLOS_ENV': '1', 'AR_MODES': '1'}, runtime=runtime)

        self.assertEqual(status, 1)
        self.assertTrue(positioning.advice['G05'].include)
        self.assertTrue(positioning.advice['G05'].use_in_ar)
        self.assertEqual(runtime.calls, [])

    def test_recorder(self):
        recorder = DecisionRecorder()
        run(FakePositioning(), environ={'NLOS_ENV': '1'}, runtime=self.runtime,
            recorder=recorder)
        self.assertEqual(list(recorder.to_dataframe()['satellite_id']), ['G05', 'G07'])

    def test_advisor_type(self):
        captured = {}

        def engine_fn(*args, advisor=None):
            captured['advisor'] = advisor
            return 0

        run(engine_fn, environ={}, runtime=self.runtime)
        self.assertIsInstance(captured['advisor'], AdvisoryWeighting)


class TestCommandLine(unittest.TestCase):
    """Argument parsing helpers"""

    def test_parse_navsys(self):
        self.assertEqual(parse_navsys('G,R'), SYS_GPS | SYS_GLO)
        self.assertEqual(parse_navsys('C'), SYS_BDS)
        self.assertEqual(parse_navsys(''), 0)

    def test_parse_epoch(self):
        t = parse_epoch('1980/01/14', '01:00:00')
        self.assertEqual(t.week, 1)
        self.assertAlmostEqual(t.tow, 90000.0)

        with self.assertRaises(ValueError):
            parse_epoch('2024/13/01', '00:00:00')

    def test_load_engine(self):
        self.assertIs(load_engine('os.path:join'), os.path.join)
        with self.assertRaises(ValueError):
            load_engine('os.path')
        with self.assertRaises(ValueError):
            load_engine('os:sep')

    def test_options_from_args(self):
        args = build_parser().parse_args(
            ['-p', '3', '-m', '10', '-sys', 'G,C', '-c', '-h', 'rover.obs'])
        prcopt = options_from_args(args)

        self.assertEqual(prcopt['mode'], 3)
        self.assertAlmostEqual(prcopt['elmin'], np.deg2rad(10.0))
        self.assertEqual(prcopt['navsys'], SYS_GPS | SYS_BDS)
        self.assertEqual(prcopt['soltype'], 2)
        self.assertEqual(prcopt['modear'], 3)

    def test_default_options(self):
        prcopt = options_from_args(build_parser().parse_args(['rover.obs']))
        defaults = default_processing_options()

        self.assertEqual(prcopt['navsys'], SYS_GPS | SYS_GLO)
        self.assertEqual(prcopt['mode'], defaults['mode'])
        self.assertEqual(prcopt['nf'], 2)

    def test_advisory_paths(self):
        args = build_parser().parse_args(
            ['--advisory-path', '/a', '--advisory-path', '/b', 'rover.obs'])
        self.assertEqual(args.advisory_path, ['/a', '/b'])
        self.assertEqual(args.advisory_module, 'asset')


class TestMain(unittest.TestCase):
    """Exit status of main"""

    def tearDown(self):
        root = logging.getLogger('pynlos')
        root.handlers.clear()
        root.setLevel(logging.NOTSET)

    def test_no_input_file(self):
        self.assertEqual(main([]), -2)

    def test_no_engine(self):
        self.assertEqual(main(['rover.obs']), -1)

    def test_invalid_time(self):
        self.assertEqual(main(['--engine', 'os.path:join', '-ts', '2024/1/1', 'noon',
                               'rover.obs']), -1)

    def test_engine_not_loadable(self):
        self.assertEqual(main(['--engine', 'pynlos_no_such_engine:postpos', 'rover.obs']), -1)
        self.assertEqual(main(['--engine', 'os.path:no_such_function', 'rover.obs']), -1)
        self.assertEqual(main(['--engine', 'os.path', 'rover.obs']), -1)


if __name__ == '__main__':
    unittest.main()
