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
"""Tests for semantic/color_utils.py."""

import io
from typing import Iterator

import pytest

from semantic.color_utils import (
    Colors,
    colored,
    format_outcome_row,
    get_outcome_color,
    print_error,
    print_success,
    print_warning,
    should_use_color,
)


@pytest.fixture
def restore_colors() -> Iterator[None]:
    """Restore Colors after a test disables them."""
    saved = {name: getattr(Colors, name) for name in dir(Colors) if name.isupper()}
    yield
    for name, value in saved.items():
        setattr(Colors, name, value)


class TestColored:
    """Tests for colored."""

    def test_wraps_text(self) -> None:
        assert "test" in colored("test", Colors.RED)

    def test_with_style(self) -> None:
        assert "test" in colored("test", Colors.GREEN, Colors.BRIGHT)

    def test_no_color(self) -> None:
        """Test that an empty color leaves the text alone."""
        assert colored("test", "", Colors.BRIGHT) == "test"

    def test_disable(self, restore_colors: None) -> None:
        """Test that disabling clears every code."""
        Colors.disable()

        assert Colors.RED == ""
        assert Colors.RESET == ""
        assert colored("plain", Colors.RED, Colors.BRIGHT) == "plain"


class TestPrintFunctions:
    """Tests for print_success, print_error and print_warning."""

    def test_print_success(self) -> None:
        """Test print_success has no prefix."""
        output = io.StringIO()
        print_success("Wrote 3 entries", file=output)
        assert "Wrote 3 entries" in output.getvalue()
        assert "Success" not in output.getvalue()

    def test_print_success_default_stream(self, capsys: pytest.CaptureFixture) -> None:
        print_success("done")
        assert "done" in capsys.readouterr().out

    def test_print_error_prefix(self) -> None:
        output = io.StringIO()
        print_error("Events file not found", file=output)
        assert "Error: Events file not found" in output.getvalue()

    def test_print_warning_without_prefix(self) -> None:
        output = io.StringIO()
        print_warning("Interrupted.", file=output, prefix=False)
        assert "Warning:" not in output.getvalue()
        assert "Interrupted." in output.getvalue()

    def test_print_error_default_stream(self, capsys: pytest.CaptureFixture) -> None:
        """Test print_error writes to stderr by default."""
        print_error("bad")
        captured = capsys.readouterr()
        assert "bad" in captured.err
        assert captured.out == ""


class TestColorSupport:
    """Tests for should_use_color."""

    def test_force(self) -> None:
        assert should_use_color(force_color=True) is True

    def test_no_color(self) -> None:
        assert should_use_color(no_color=True) is False

    def test_no_color_wins(self) -> None:
        assert should_use_color(force_color=True, no_color=True) is False

    def test_not_a_tty(self, capsys: pytest.CaptureFixture) -> None:
        """Test that captured stdout is not treated as a terminal."""
        assert should_use_color() is False


class TestOutcomeColors:
    """Tests for outcome colors."""

    @pytest.mark.parametrize("outcome", ["compile", "preprocess", "link", "query", "unknown", "failed"])
    def test_known_outcomes(self, outcome: str) -> None:
        color, style = get_outcome_color(outcome)
        assert isinstance(color, str)
        assert isinstance(style, str)

    def test_case_insensitive(self) -> None:
        assert get_outcome_color("COMPILE") == get_outcome_color("compile")

    def test_unknown_outcome(self) -> None:
        assert get_outcome_color("bogus") == (Colors.WHITE, Colors.NORMAL)

    def test_follows_disable(self, restore_colors: None) -> None:
        """Test that outcome colors are empty once colors are disabled."""
        Colors.disable()
        assert get_outcome_color("failed") == ("", "")


class TestOutcomeRow:
    """Tests for format_outcome_row."""

    def test_plain_row(self, restore_colors: None) -> None:
        Colors.disable()
        assert format_outcome_row("link", 12) == "  link             12"

    def test_custom_width(self, restore_colors: None) -> None:
        Colors.disable()
        assert format_outcome_row("compile", 3, width=8) == "  compile      3"

    def test_colored_row(self) -> None:
        row = format_outcome_row("compile", 7)
        assert "compile" in row
        assert row.endswith("    7")
