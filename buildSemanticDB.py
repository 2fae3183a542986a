#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Generate a compilation database from intercepted process executions.

This script reads an events file (one JSON object per line, as written by a build
interceptor), recognizes which executions are compiler calls and what they do
(compile, preprocess, link, query), and writes a compile_commands.json for
clang tooling.

Requirements:
    - Python 3.8+
    - colorama: pip install colorama
    - packaging: pip install packaging

Usage:
    buildSemanticDB.py <events_file> [-o compile_commands.json] [--config FILE] [--summary]

Exit Codes:
    0: Success
    1: Invalid arguments, configuration or events file
    2: Runtime error (e.g. output not writable)
    130: Interrupted
"""

import os
import sys
import signal
import logging
import argparse
from collections import Counter
from typing import Any, List, Optional

__version__ = "1.0.0"
__author__ = "Mana Battery"

from semantic.color_utils import Colors, format_outcome_row, print_error, print_success, print_warning, should_use_color
from semantic.compilation_db import Entry, deduplicate_entries, filter_entries, semantic_to_entries, write_compilation_database
from semantic.config_utils import Configuration, load_configuration
from semantic.constants import COMPILE_COMMANDS_JSON, EXIT_INVALID_ARGS, EXIT_KEYBOARD_INTERRUPT, EXIT_RUNTIME_ERROR, EXIT_SUCCESS, BuildSemanticError
from semantic.execution import load_executions
from semantic.package_verification import require_package
from semantic.tool_chain import create_default_tool_chain

__all__ = ["EXIT_SUCCESS", "main", "parse_args", "generate"]

# Summary row order
OUTCOMES = ("compile", "preprocess", "link", "query", "unknown", "failed", "not-compiler")


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a compilation database from intercepted compiler executions.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s events.json\n"
        f"  %(prog)s events.json -o build/compile_commands.json --summary\n"
        f"  %(prog)s events.json --config semantic.json --include-links\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("events_file", help="Intercepted executions, one JSON event per line")

    parser.add_argument("--output", "-o", metavar="FILE", default=COMPILE_COMMANDS_JSON, help=f"Compilation database to write (default: {COMPILE_COMMANDS_JSON})")

    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")

    parser.add_argument("--include-links", action="store_true", help="Also write entries for link steps")

    parser.add_argument("--command-as-string", action="store_true", help='Write "command" strings instead of "arguments" arrays')

    parser.add_argument("--drop-output-field", action="store_true", help='Leave the "output" field out of entries')

    parser.add_argument("--exclude-compiler", metavar="PATH", action="append", default=[], help="Never treat PATH as a compiler (repeatable)")

    parser.add_argument("--summary", action="store_true", help="Print recognition statistics")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging to stderr")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def apply_overrides(configuration: Configuration, args: argparse.Namespace) -> Configuration:
    """Apply command-line switches on top of the configuration file settings."""
    if args.include_links:
        configuration.include_links = True
    if args.command_as_string:
        configuration.command_as_array = False
    if args.drop_output_field:
        configuration.drop_output_field = True
    configuration.compilers_to_exclude.extend(args.exclude_compiler)
    return configuration


def generate(events_file: str, configuration: Configuration, stats: Optional[Counter] = None) -> List[Entry]:
    """Recognize every execution in an events file and build database entries.

    Args:
        events_file: Path to the events file
        configuration: Recognition and output settings
        stats: Optional counter updated with one count per outcome

    Returns:
        Filtered, deduplicated entries in event order

    Raises:
        EventFileError: If the events file cannot be read or parsed
    """
    if stats is None:
        stats = Counter()

    chain = create_default_tool_chain(configuration.compiler_tools(), configuration.compilers_to_exclude)
    logging.debug("Tool chain: %r", chain)

    executions = load_executions(events_file)
    logging.info("Loaded %d executions from %s", len(executions), events_file)

    entries: List[Entry] = []
    for execution, recognition in chain.classify_all(executions):
        if recognition is None:
            stats["not-compiler"] += 1
            continue
        if not recognition.ok:
            stats["failed"] += 1
            logging.warning("%s: %s (%s)", execution.program, recognition.message, recognition.error_kind.value)
            continue
        stats[recognition.semantic.kind] += 1
        entries.extend(semantic_to_entries(recognition.semantic, configuration.include_links))

    entries = filter_entries(entries, configuration.paths_to_include, configuration.paths_to_exclude)
    return deduplicate_entries(entries, configuration.duplicate_filter_fields)


def print_summary(stats: Counter, entry_count: int) -> None:
    print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Recognition Summary ==={Colors.RESET}")
    print(f"Executions: {Colors.BRIGHT}{Colors.WHITE}{sum(stats.values())}{Colors.RESET}")
    for outcome in OUTCOMES:
        print(format_outcome_row(outcome, stats.get(outcome, 0)))
    print(f"Entries written: {Colors.BRIGHT}{entry_count}{Colors.RESET}")


def run(argv: Optional[List[str]] = None) -> int:
    """Generate the compilation database.

    Returns:
        Exit code (0 for success, 1 for a missing events file)

    Raises:
        BuildSemanticError: On invalid configuration, unreadable events or write failures
    """
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    require_package("colorama", "colored output")

    if not os.path.isfile(args.events_file):
        print_error(f"Events file not found: {args.events_file}")
        return EXIT_INVALID_ARGS

    configuration = load_configuration(args.config) if args.config else Configuration()
    configuration = apply_overrides(configuration, args)

    stats: Counter = Counter()
    entries = generate(args.events_file, configuration, stats)

    count = write_compilation_database(args.output, entries, configuration.command_as_array, configuration.drop_output_field)

    try:
        if args.summary:
            print_summary(stats, count)
        if stats.get("failed"):
            print_warning(f"{stats['failed']} compiler call(s) could not be recognized", prefix=False)
        print_success(f"Wrote {count} entries to {args.output}")
    except BrokenPipeError:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())

    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script and the installed command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        return run(argv)
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        return EXIT_KEYBOARD_INTERRUPT
    except BuildSemanticError as e:
        print_error(str(e))
        return e.exit_code
    except Exception as e:
        logging.debug("Unexpected failure", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
