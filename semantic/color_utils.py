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
"""Terminal colors for recognition reports, backed by colorama."""

import os
import sys
import logging
from typing import Optional, TextIO, Tuple

from colorama import Fore, Style, init

logger = logging.getLogger(__name__)

# Keep escape codes when stdout is redirected; should_use_color() decides instead
init(autoreset=False, strip=False)


class Colors:
    """Escape codes used by the reports. Cleared by disable()."""

    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    BLUE = Fore.BLUE
    CYAN = Fore.CYAN
    WHITE = Fore.WHITE

    RESET = Style.RESET_ALL
    BRIGHT = Style.BRIGHT
    NORMAL = Style.NORMAL

    @staticmethod
    def disable() -> None:
        for attr in dir(Colors):
            if attr.isupper():
                setattr(Colors, attr, "")


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in color codes, or return it unchanged when color is empty."""
    if not color:
        return text
    return f"{style}{color}{text}{Colors.RESET}"


def _print_message(label: str, text: str, color: str, file: Optional[TextIO]) -> None:
    message = f"{label}: {text}" if label else text
    print(colored(message, color), file=file if file is not None else sys.stderr)


def print_success(text: str, file: Optional[TextIO] = None) -> None:
    """Print a green status line to stdout."""
    print(colored(text, Colors.GREEN), file=file if file is not None else sys.stdout)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a red message to stderr.

    Args:
        text: Error message
        file: Stream to write to (default: sys.stderr)
        prefix: Prepend "Error: " to the message
    """
    _print_message("Error" if prefix else "", text, Colors.RED, file)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a yellow message to stderr.

    Args:
        text: Warning message
        file: Stream to write to (default: sys.stderr)
        prefix: Prepend "Warning: " to the message
    """
    _print_message("Warning" if prefix else "", text, Colors.YELLOW, file)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Decide whether reports are colored.

    Args:
        force_color: Color even when stdout is not a terminal
        no_color: Never color, wins over force_color

    Returns:
        True if color should be used
    """
    if no_color:
        return False
    if force_color:
        return True
    if not sys.stdout.isatty():
        return False
    # https://no-color.org
    return not os.environ.get("NO_COLOR")


# Attribute names on Colors, looked up late so that Colors.disable() applies
OUTCOME_COLORS = {
    "compile": ("GREEN", "BRIGHT"),
    "preprocess": ("GREEN", "NORMAL"),
    "link": ("BLUE", "NORMAL"),
    "query": ("CYAN", "NORMAL"),
    "unknown": ("YELLOW", "NORMAL"),
    "failed": ("RED", "BRIGHT"),
}


def get_outcome_color(outcome: str) -> Tuple[str, str]:
    """Get color and style codes for a recognition outcome.

    Args:
        outcome: Outcome name (compile/preprocess/link/query/unknown/failed), any case

    Returns:
        Tuple of (color, style)
    """
    color, style = OUTCOME_COLORS.get(outcome.lower(), ("WHITE", "NORMAL"))
    return getattr(Colors, color), getattr(Colors, style)


def format_outcome_row(outcome: str, count: int, width: int = 13) -> str:
    """Format one line of the recognition summary, colored by outcome."""
    color, style = get_outcome_color(outcome)
    return f"  {colored(outcome.ljust(width), color, style)} {count:5}"
