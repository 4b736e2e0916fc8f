#!/usr/bin/env python3
"""
sap1run: SAP-1 microcode VM harness

Runs the bundled program one clock pulse at a time and prints the
machine state after every pulse.

Usage:
    python sap1run.py [--pause] [--max-cycles N] [--quiet] [-v] [--log-file run.log]
    python sap1run.py --list

Exit status: 0 on HLT, 2 if --max-cycles ran out first.
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from sap1_vm import SAP1Emulator, StopReason, __version__, listing
from sap1_vm.cpu.signals import signal_names
from sap1_vm.log_setup import setup_logging


def parse_int_arg(value: str) -> int:
    """Parse an integer argument that may be hex (0x...), $ prefix, or decimal."""
    value = value.strip()
    if value.lower().startswith("0x"):
        return int(value, 16)
    if value.startswith("$"):
        return int(value[1:], 16)
    return int(value)


def state_table(emu: SAP1Emulator) -> Table:
    s = emu.snapshot()
    table = Table(title=f"cycle {s.cycles}", show_header=False, box=None)
    table.add_column("reg", style="bold")
    table.add_column("value")
    table.add_row("Halt", "1" if s.halted else "0")
    table.add_row("PC", f"${s.pc:X}")
    table.add_row("IR", f"${s.ir:02X}")
    table.add_row("MAR", f"${s.mar:X}")
    table.add_row("A / B", f"${s.a:02X} / ${s.b:02X}")
    table.add_row("ALU Result", f"${s.alu_result:02X}")
    table.add_row("Bus", f"${s.bus:02X}")
    table.add_row("Control Word", f"${s.control_word:04X}  {signal_names(s.control_word)}")
    table.add_row("Flags", f"C={int(s.carry)} Z={int(s.zero)}")
    table.add_row("Micro Step", f"{s.phase.name}")
    return table


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="sap1run",
        description="Step the SAP-1 microcode VM through its bundled program",
    )
    parser.add_argument("--max-cycles", default=str(SAP1Emulator.DEFAULT_MAX_CYCLES),
                        help="Stop after this many micro-steps (default: %(default)s)")
    parser.add_argument("--pause", action="store_true",
                        help="Wait for Enter after every clock pulse (off by default)")
    parser.add_argument("--trace", action="store_true",
                        help="Print a one-line trace per pulse instead of tables")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only print the final state")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Log engine activity (-v info, -vv debug)")
    parser.add_argument("--log-file", default=None,
                        help="Write a full debug log to this file")
    parser.add_argument("--list", action="store_true",
                        help="Print the program listing and exit")
    parser.add_argument("--version", action="version",
                        version=f"sap1run {__version__}")
    args = parser.parse_args(argv)

    try:
        max_cycles = parse_int_arg(args.max_cycles)
    except ValueError:
        print(f"Error: bad --max-cycles value: {args.max_cycles}", file=sys.stderr)
        return 1

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(level=level, log_file=args.log_file)

    console = Console()
    emu = SAP1Emulator()

    if args.list:
        console.print(listing(emu.mem.dump()), highlight=False)
        return 0

    emu.enable_trace(args.trace)
    reason = StopReason.TIMEOUT
    while emu.cycles < max_cycles:
        halted = emu.step()
        if args.trace and not args.quiet:
            console.print(emu.get_trace(), highlight=False)
            emu.clear_trace()
        elif not args.quiet:
            console.print(state_table(emu))
        if halted:
            reason = StopReason.HALT
            break
        if args.pause:
            input()

    if args.quiet:
        console.print(state_table(emu))
    console.print(f"Stopped: {reason.value}  Output: {list(emu.outputs)}", highlight=False)
    return 0 if reason is StopReason.HALT else 2


if __name__ == "__main__":
    sys.exit(main())
