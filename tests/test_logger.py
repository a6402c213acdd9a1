#!/usr/bin/env python3
"""Test suite for logging configuration"""

import logging
import os
import shutil
import tempfile
import unittest

from pynlos.logger import (TRACE, ColoredFormatter, LogContext, LoggerConfig,
                           level_from_verbosity, setup_logger, setup_logger_from_config)


class TestLogger(unittest.TestCase):
    """TRACE level, verbosity mapping and logger setup"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.name = 'pynlos.test_logger'

    def tearDown(self):
        for name in (self.name, 'pynlos', 'pynlos.bridge.facade'):
            log = logging.getLogger(name)
            for handler in log.handlers:
                handler.close()
            log.handlers = []
            log.setLevel(logging.NOTSET)
        shutil.rmtree(self.test_dir)

    def test_verbosity_levels(self):
        self.assertEqual(level_from_verbosity(0), logging.WARNING)
        self.assertEqual(level_from_verbosity(1), logging.INFO)
        self.assertEqual(level_from_verbosity(2), logging.DEBUG)
        self.assertEqual(level_from_verbosity(5), TRACE)
        self.assertEqual(logging.getLevelName(TRACE), 'TRACE')

    def test_trace_method(self):
        log = logging.getLogger(self.name)
        with self.assertLogs(self.name, level=TRACE) as captured:
            log.trace("check_sat G05 result=1")
        self.assertEqual(captured.records[0].levelname, 'TRACE')

    def test_setup_logger_file(self):
        log_file = os.path.join(self.test_dir, 'rnx2rtkp.log')
        log = setup_logger(self.name, 'DEBUG', log_file=log_file, console=False)
        log.debug("get_val call failed")
        log.trace("not written")
        log.handlers[0].flush()

        with open(log_file) as f:
            content = f.read()
        self.assertIn('DEBUG - get_val call failed', content)
        self.assertNotIn('not written', content)

    def test_colored_formatter_keeps_record(self):
        record = logging.LogRecord(self.name, logging.INFO, __file__, 1, "loaded", None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)
        self.assertIn('\033[32mINFO', text)
        self.assertEqual(record.levelname, 'INFO')

    def test_log_context(self):
        log = setup_logger(self.name, 'INFO', console=False)
        with LogContext(log, 'trace'):
            self.assertEqual(log.level, TRACE)
        self.assertEqual(log.level, logging.INFO)

    def test_logger_config(self):
        config = LoggerConfig()
        config.configure_from_dict({'default_level': 'WARNING', 'console': False})
        self.assertEqual(config.get_level_for_module('pynlos.rtk'), 'WARNING')

        setup_logger_from_config({
            'default_level': 'INFO',
            'console': True,
            'module_levels': {'pynlos.bridge.facade': 'TRACE'},
        })
        self.assertEqual(logging.getLogger('pynlos').level, logging.INFO)
        self.assertEqual(logging.getLogger('pynlos.bridge.facade').level, TRACE)


if __name__ == '__main__':
    unittest.main()
