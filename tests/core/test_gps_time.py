#!/usr/bin/env python3
"""Test suite for GPS time handling"""

import unittest
from datetime import datetime

from pynlos.core.time import GNSSTime, gps_seconds_to_week_tow, time2gpst


class TestGNSSTime(unittest.TestCase):
    """Test GNSSTime"""

    def test_normalisation(self):
        t = GNSSTime(2200, 604800.0 + 10.0)
        self.assertEqual(t.week, 2201)
        self.assertAlmostEqual(t.tow, 10.0)

        t = GNSSTime(2200, -10.0)
        self.assertEqual(t.week, 2199)
        self.assertAlmostEqual(t.tow, 604790.0)

    def test_gps_epoch(self):
        t = GNSSTime.from_datetime(datetime(1980, 1, 6))
        self.assertEqual(t.week, 0)
        self.assertEqual(t.tow, 0.0)

    def test_round_trip_datetime(self):
        dt = datetime(2022, 3, 10, 0, 0, 0)
        t = GNSSTime.from_datetime(dt)
        self.assertEqual(t.to_datetime(), dt)
        # 2022-03-10 is a Thursday of GPS week 2200
        self.assertEqual(t.week, 2200)
        self.assertAlmostEqual(t.tow, 345600.0)

    def test_arithmetic(self):
        t = GNSSTime(2200, 604799.0)
        t2 = t + 2.0
        self.assertEqual(t2.week, 2201)
        self.assertAlmostEqual(t2 - t, 2.0)
        self.assertTrue(t < t2)
        self.assertEqual(t2 - 2.0, t)

    def test_gps_seconds_constructor(self):
        t = GNSSTime.from_gps_seconds(2200 * 604800 + 12.5)
        self.assertEqual((t.week, t.tow), (2200, 12.5))
        self.assertAlmostEqual(t.add_seconds(-13.0).to_gps_seconds(), 2200 * 604800 - 0.5)

    def test_invalid_system(self):
        with self.assertRaises(ValueError):
            GNSSTime(2200, 0.0, 'XYZ')


class TestConversions(unittest.TestCase):
    """Test week/tow conversions"""

    def test_gps_seconds(self):
        week, tow = gps_seconds_to_week_tow(2200 * 604800 + 345600.5)
        self.assertEqual(week, 2200)
        self.assertAlmostEqual(tow, 345600.5)

    def test_negative_seconds(self):
        with self.assertRaises(ValueError):
            gps_seconds_to_week_tow(-1.0)

    def test_time2gpst_inputs(self):
        expected = (2200, 345600.0)
        self.assertEqual(time2gpst(GNSSTime(2200, 345600.0)), expected)
        self.assertEqual(time2gpst(2200 * 604800 + 345600.0), expected)
        self.assertEqual(time2gpst(datetime(2022, 3, 10)), expected)


if __name__ == '__main__':
    unittest.main()
