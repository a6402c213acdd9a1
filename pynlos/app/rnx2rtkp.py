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
rnx2rtkp with advisory bridge
=============================

Host program: initializes the bridge, reads the environment overrides,
runs the positioning engine with an AdvisoryWeighting, then finalizes the
bridge exactly once whatever the outcome of the run.

The positioning engine is an external callable with the signature::

    run_positioning(start_time, end_time, interval, processing_options,
                    solution_options, file_options, input_files, output_file,
                    advisor=None) -> int

Usage::

    python -m pynlos.app.rnx2rtkp --engine mypkg.postpos:postpos \\
        -p 2 -m 15 -sys G,C -x 2 -o out.pos rover.obs base.obs nav.rnx
"""

import argparse
import importlib
import logging
import os
import sys
from datetime import datetime
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..bridge.facade import DecisionFacade
from ..bridge.finalizer import finalize
from ..bridge.lifecycle import initialize
from ..core.config import load_from_environment, log_config
from ..core.constants import DEFAULT_ADVISORY_MODULE, SYS_GPS, SYS_GLO
from ..core.satellite_numbering import char2sys
from ..core.time import GNSSTime
from ..logger import level_from_verbosity, setup_logger
from ..rtk.advisory_weighting import AdvisoryWeighting
from ..rtk.recorder import DecisionRecorder

PROGNAME = "rnx2rtkp"
MAXFILE = 16

# Positioning modes
PMODE_SINGLE = 0
PMODE_DGPS = 1
PMODE_KINEMA = 2
PMODE_STATIC = 3
PMODE_MOVEB = 4
PMODE_FIXED = 5
PMODE_PPP_KINEMA = 6
PMODE_PPP_STATIC = 7

logger = logging.getLogger(__name__)


def default_processing_options() -> dict:
    """Processing options the host program starts from"""
    return {
        'mode': PMODE_KINEMA,
        'navsys': 0,
        'elmin': np.deg2rad(15.0),
        'nf': 2,
        'thresar': 3.0,
        'soltype': 0,      # 0: forward, 1: backward, 2: combined
        'modear': 1,       # 1: continuous, 2: instantaneous, 3: fix and hold
        'refpos': 1,
        'glomodear': 1,
    }


def parse_navsys(text: str) -> int:
    """Navigation system mask from ``"G,R,E"``"""
    navsys = 0
    for token in text.split(','):
        token = token.strip()
        if token:
            navsys |= char2sys(token[0])
    return navsys


def parse_epoch(date: str, time: str) -> GNSSTime:
    """GPS time from ``y/m/d`` and ``h:m:s`` strings"""
    dt = datetime.strptime(f"{date} {time}", "%Y/%m/%d %H:%M:%S")
    return GNSSTime.from_datetime(dt)


def load_engine(target: str) -> Callable:
    """Import ``module:function`` and return the function"""
    module_name, _, func_name = target.partition(':')
    if not module_name or not func_name:
        raise ValueError(f"engine must be given as module:function, got '{target}'")
    module = importlib.import_module(module_name)
    engine = getattr(module, func_name)
    if not callable(engine):
        raise ValueError(f"'{target}' is not callable")
    return engine


def run(run_positioning: Callable,
        start_time: Optional[GNSSTime] = None,
        end_time: Optional[GNSSTime] = None,
        interval: float = 0.0,
        processing_options: Optional[dict] = None,
        solution_options: Optional[dict] = None,
        file_options: Optional[dict] = None,
        input_files: Sequence[str] = (),
        output_file: str = "",
        module_name: str = DEFAULT_ADVISORY_MODULE,
        search_paths: Sequence[str] = (),
        environ=None,
        runtime=None,
        recorder: Optional[DecisionRecorder] = None) -> int:
    """
    Run the positioning engine with the advisory bridge attached

    The working directory is searched for the classification module before
    ``search_paths``. The bridge is finalized after the run, also when the
    engine raises.

    Returns
    -------
    int
        Status code returned by ``run_positioning``
    """
    state = initialize(module_name, [os.getcwd(), *search_paths], runtime=runtime)

    config = load_from_environment(environ)
    log_config(config)

    facade = DecisionFacade(state, observer=recorder)
    advisor = AdvisoryWeighting(facade, config)

    try:
        status = run_positioning(start_time, end_time, interval,
                                 processing_options or default_processing_options(),
                                 solution_options or {}, file_options or {},
                                 list(input_files), output_file, advisor=advisor)
    finally:
        finalize(state)

    if recorder is not None:
        recorder.log_summary()
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGNAME, add_help=False,
        description='Read RINEX OBS/NAV files and compute receiver positions, '
                    'consulting a satellite classification module per epoch.')
    parser.add_argument('-?', '--help', action='help', help='print help')
    parser.add_argument('-o', dest='output', default='', help='set output file [stdout]')
    parser.add_argument('-ts', nargs=2, metavar=('DATE', 'TIME'),
                        help='start day/time (y/m/d h:m:s) [obs start time]')
    parser.add_argument('-te', nargs=2, metavar=('DATE', 'TIME'),
                        help='end day/time (y/m/d h:m:s) [obs end time]')
    parser.add_argument('-ti', type=float, default=0.0, help='time interval (sec) [all]')
    parser.add_argument('-p', type=int, dest='mode', help='positioning mode [2]')
    parser.add_argument('-m', type=float, dest='mask', help='elevation mask angle (deg) [15]')
    parser.add_argument('-sys', dest='navsys', help='nav system(s) G,R,E,J,C,I [G,R]')
    parser.add_argument('-f', type=int, dest='nf', help='number of frequencies [2]')
    parser.add_argument('-v', type=float, dest='thresar',
                        help='validation threshold for integer ambiguity [3.0]')
    parser.add_argument('-b', action='store_const', const=1, dest='soltype',
                        help='backward solutions')
    parser.add_argument('-c', action='store_const', const=2, dest='soltype',
                        help='forward/backward combined solutions')
    parser.add_argument('-i', action='store_const', const=2, dest='modear',
                        help='instantaneous integer ambiguity resolution')
    parser.add_argument('-h', action='store_const', const=3, dest='modear',
                        help='fix and hold for integer ambiguity resolution')
    parser.add_argument('-x', type=int, default=0, dest='trace',
                        help='debug trace level (0:off) [0]')
    parser.add_argument('--engine', help='positioning engine as module:function')
    parser.add_argument('--advisory-module', default=DEFAULT_ADVISORY_MODULE,
                        help=f'classification module [{DEFAULT_ADVISORY_MODULE}]')
    parser.add_argument('--advisory-path', action='append', default=[],
                        help='directory searched for the classification module (repeatable)')
    parser.add_argument('files', nargs='*', help='input files')
    return parser


def options_from_args(args: argparse.Namespace) -> dict:
    """Processing options from parsed command line arguments"""
    prcopt = default_processing_options()
    if args.mode is not None:
        prcopt['mode'] = args.mode
    if args.mask is not None:
        prcopt['elmin'] = np.deg2rad(args.mask)
    if args.navsys:
        prcopt['navsys'] = parse_navsys(args.navsys)
    if args.nf is not None:
        prcopt['nf'] = args.nf
    if args.thresar is not None:
        prcopt['thresar'] = args.thresar
    if args.soltype is not None:
        prcopt['soltype'] = args.soltype
    if args.modear is not None:
        prcopt['modear'] = args.modear
    if not prcopt['navsys']:
        prcopt['navsys'] = SYS_GPS | SYS_GLO
    return prcopt


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point; returns the process status"""
    args = build_parser().parse_args(argv)

    setup_logger("pynlos", logging.getLevelName(level_from_verbosity(args.trace)))

    if not args.files:
        logger.error("error : no input file")
        return -2
    if not args.engine:
        logger.error("error : no positioning engine (--engine module:function)")
        return -1

    try:
        ts = parse_epoch(*args.ts) if args.ts else None
        te = parse_epoch(*args.te) if args.te else None
    except ValueError as exc:
        logger.error(f"error : invalid time: {exc}")
        return -1

    try:
        engine = load_engine(args.engine)
    except (ImportError, AttributeError, ValueError) as exc:
        logger.error(f"error : cannot load engine '{args.engine}': {exc}")
        return -1

    recorder = DecisionRecorder() if args.trace >= 2 else None

    solopt = {'prog': PROGNAME, 'trace': args.trace}
    filopt = {'trace': f"{PROGNAME}.trace"}

    return run(engine, ts, te, args.ti, options_from_args(args), solopt, filopt,
               args.files[:MAXFILE], args.output,
               module_name=args.advisory_module,
               search_paths=args.advisory_path,
               recorder=recorder)


if __name__ == "__main__":
    sys.exit(main())
