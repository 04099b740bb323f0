#!/usr/bin/env python3
"""
cmrun: Counter Machine VM runner

Usage:
    python cmrun.py <initial_pc> <memory_file> [--steps N] [--trace]
                                               [-v] [-q] [--log-file PATH]

Loads a program image (one memory cell per line, blank lines skipped),
prints the initial state, then asks how many steps to run. After each
run the machine state is printed again. Enter 'q' or 'quit' to leave.

With --steps the prompt is skipped: N steps are run once and the final
state is printed.

Examples:
    python cmrun.py 0 examples/add.cm
    python cmrun.py 0 examples/pointer.cm --steps 100 --trace
    python cmrun.py 0 examples/add.cm -vv --log-file run.log
"""

import argparse
import logging
import sys
import os
from pathlib import Path
from typing import Optional

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from counter_vm import __version__
from counter_vm.decoder import parse_int
from counter_vm.errors import MachineError
from counter_vm.machine import CounterMachine, StopReason
from counter_vm.memory import load_image

PROMPT = "Enter number of steps to execute (or 'q' to quit): "
QUIT_WORDS = ('q', 'quit')

log = logging.getLogger('cmrun')


def setup_logging(verbose: int = 0, quiet: bool = False, log_file: Optional[str] = None):
    """Configure root logging from the command-line verbosity flags."""
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # -vv or more
        level = logging.DEBUG

    handlers = []

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        handlers=handlers,
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmrun",
        description="Counter Machine VM: run succ / beqz-pred / exit programs",
    )
    parser.add_argument("initial_pc", help="Initial program counter (integer)")
    parser.add_argument("memory_file", help="Program image, one cell per line")
    parser.add_argument("--steps", type=int, default=None,
                        help="Run this many steps, print state and exit")
    parser.add_argument("--trace", action="store_true",
                        help="Print every executed instruction after each run")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"cmrun {__version__}")
    return parser


def run_and_report(vm: CounterMachine, steps: int) -> StopReason:
    """Run up to `steps` instructions, then print trace and state."""
    before = vm.mem.snapshot()
    reason = vm.run_steps(steps)

    for addr, (old, new) in sorted(vm.mem.diff_snapshots(before, vm.mem.snapshot()).items()):
        log.info("[%d]: %s -> %s", addr, old, new)
    log.info("Run ended: %s after %d total steps", reason.value, vm.steps)

    if vm.tracing:
        trace = vm.get_trace()
        if trace:
            print(trace)
        vm.clear_trace()
    print()
    print(vm.display())
    print()
    return reason


def interactive_loop(vm: CounterMachine):
    """Prompt for step counts until 'q', 'quit' or end of input."""
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        line = line.strip()

        if line in QUIT_WORDS:
            break

        steps = parse_int(line)
        if steps is None or steps < 0:
            print("Invalid input. Please enter a number or 'q' to quit")
            continue
        if steps == 0:
            print("Please enter a positive number of steps")
            continue

        run_and_report(vm, steps)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet, args.log_file)

    pc = parse_int(args.initial_pc.strip())
    if pc is None:
        print(f"Invalid PC value: {args.initial_pc}", file=sys.stderr)
        return 1

    if args.steps is not None and args.steps < 1:
        print(f"Invalid step count: {args.steps} (must be positive)", file=sys.stderr)
        return 1

    try:
        memory = load_image(args.memory_file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to load memory file: {e}", file=sys.stderr)
        return 1

    log.info("Loaded %d cells from %s", len(memory), args.memory_file)

    vm = CounterMachine(pc, memory)
    vm.enable_trace(args.trace)

    print("Counter Machine VM initialized")
    print()
    print(vm.display())
    print()

    try:
        if args.steps is not None:
            run_and_report(vm, args.steps)
        else:
            interactive_loop(vm)
    except MachineError as e:
        print(f"Machine error ({e.kind}): {e}", file=sys.stderr)
        if vm.tracing and vm.get_trace():
            print(vm.get_trace(), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
