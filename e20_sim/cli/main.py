from __future__ import annotations
import argparse
import sys

from ..config import SimConfig
from ..errors import SimulatorError
from ..loader import load_machine_code
from ..runtime.cache import CacheHierarchy
from ..runtime.simulator import run as run_sim
from ..runtime.state import MachineState
from ..utils.logging import get_logger
from ..utils.reporting import format_cache_config, format_log_entry, format_state, generate_report


def cmd_run(args):
    """Handles the 'run' command."""
    config = SimConfig.from_args(args)
    logger = get_logger("e20-sim", config.log_level)

    if not config.program:
        raise SimulatorError("No program given (pass a filename or set 'program' in the config file)")
    logger.debug("Configuration: %s", config)

    # 1. Load the program and build the cache model
    state = MachineState()
    state.load_program(load_machine_code(config.program))

    levels = config.cache_levels()
    cache = CacheHierarchy(levels) if levels else None
    for level in levels:
        print(format_cache_config(level))

    # 2. Run simulation, printing the cache log as accesses happen
    on_event = (lambda event: print(format_log_entry(event))) if cache is not None else None
    result = run_sim(state, cache, max_steps=config.max_steps,
                     memquantity=config.memquantity, on_event=on_event)

    # 3. Final state and reports
    if cache is None or config.show_state:
        print(format_state(result.final_state))

    if config.report_dir:
        generate_report(result, config)
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="e20-sim",
        description="E20 simulator with optional L1/L2 cache model",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("run", help="Run a machine code program",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Core args (set default=None to allow override from YAML)
    pr.add_argument("program", nargs='?', default=None,
                    help="The file containing machine code, typically with .bin suffix")
    pr.add_argument("--cache", type=str, default=None,
                    help="Cache configuration: size,associativity,blocksize (for one cache) "
                         "or size,associativity,blocksize,size,associativity,blocksize (for two caches)")
    pr.add_argument("--max-steps", type=int, default=None, dest="max_steps",
                    help="Abort if the program has not halted after this many instructions")

    out_group = pr.add_argument_group('Output Arguments')
    out_group.add_argument("--memquantity", type=int, default=None,
                           help="Number of memory words in the final state dump (default 128)")
    out_group.add_argument("--show-state", action="store_true", default=None, dest="show_state",
                           help="Print the final state even when a cache is simulated")
    out_group.add_argument("--report", type=str, default=None, dest="report_dir",
                           help="Directory to save JSON/HTML reports")
    out_group.add_argument("--log-level", type=str, default=None, dest="log_level",
                           choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                           help="Logging verbosity (DEBUG traces every instruction)")

    pr.set_defaults(func=cmd_run)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except SimulatorError as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
