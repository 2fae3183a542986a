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
"""Linker driver and archiver recognizers.

Linker drivers (ld, gold, lld, mold) never compile: every positional argument is a
link input. Archivers (ar, llvm-ar, gcc-ar) use an operation letter followed by the
archive name and the members:

    ar rcs libfoo.a foo.o bar.o   ->  Link{inputs: [foo.o, bar.o], output_file: libfoo.a, flags: [rcs]}
"""

import logging
from typing import List, Optional, Sequence, Tuple

from semantic.arg_parser import MatchedArgument
from semantic.constants import MalformedInvocationError
from semantic.execution import Execution
from semantic.flag_table import LINK_OUTPUT_CATEGORIES, Category, FlagGrammarTable, exact, glued, glued_or_separate, prefix
from semantic.semantic_types import Link, QueryOnly, Semantic, Unknown
from semantic.tool_base import CompilerTool, select_flags

logger = logging.getLogger(__name__)

__all__ = ["LINKER_FLAG_TABLE", "ARCHIVER_FLAG_TABLE", "LinkerTool", "ArchiverTool"]

LINKER_FLAG_TABLE = FlagGrammarTable(
    "ld",
    [
        glued_or_separate("-o", Category.OUTPUT_FILE_MARKER),
        glued_or_separate("--output", Category.OUTPUT_FILE_MARKER, eq=True),
        exact("--version", Category.QUERY_MARKER),
        exact("-v", Category.QUERY_MARKER),
        exact("-V", Category.QUERY_MARKER),
        exact("--help", Category.QUERY_MARKER),
        glued_or_separate("-l", Category.LINK_ONLY),
        glued_or_separate("-L", Category.LINK_ONLY),
        glued_or_separate("--library", Category.LINK_ONLY, eq=True),
        glued_or_separate("--library-path", Category.LINK_ONLY, eq=True),
        glued_or_separate("-T", Category.LINK_ONLY),
        glued_or_separate("--script", Category.LINK_ONLY, eq=True),
        glued_or_separate("-e", Category.LINK_ONLY),
        glued_or_separate("--entry", Category.LINK_ONLY, eq=True),
        glued_or_separate("-soname", Category.LINK_ONLY, eq=True),
        glued_or_separate("-h", Category.LINK_ONLY),
        glued_or_separate("-z", Category.LINK_ONLY),
        glued_or_separate("-m", Category.KEPT),
        glued_or_separate("-Map", Category.LINK_ONLY, eq=True),
        glued_or_separate("--sysroot", Category.BOTH, eq=True),
        exact("-rpath", Category.LINK_ONLY, 1),
        exact("-rpath-link", Category.LINK_ONLY, 1),
        exact("-plugin", Category.LINK_ONLY, 1),
        glued("-plugin-opt=", Category.LINK_ONLY),
        exact("-shared", Category.LINK_ONLY),
        exact("-static", Category.LINK_ONLY),
        exact("-pie", Category.LINK_ONLY),
        exact("-r", Category.LINK_ONLY),
        exact("-s", Category.LINK_ONLY),
        prefix("-B", Category.LINK_ONLY),
        exact("--start-group", Category.LINK_ONLY),
        exact("--end-group", Category.LINK_ONLY),
        exact("--whole-archive", Category.LINK_ONLY),
        exact("--no-whole-archive", Category.LINK_ONLY),
        exact("--as-needed", Category.LINK_ONLY),
        exact("--no-as-needed", Category.LINK_ONLY),
        exact("--gc-sections", Category.LINK_ONLY),
    ],
    option_prefixes=("-", "@"),
)

ARCHIVER_FLAG_TABLE = FlagGrammarTable(
    "ar",
    [
        exact("--version", Category.QUERY_MARKER),
        exact("-V", Category.QUERY_MARKER),
        exact("--help", Category.QUERY_MARKER),
        glued_or_separate("--plugin", Category.KEPT, eq=True),
        glued_or_separate("--target", Category.KEPT, eq=True),
        glued("--format=", Category.KEPT),
        glued("--rsp-quoting=", Category.KEPT),
        exact("--thin", Category.KEPT),
        prefix("-X", Category.KEPT),
    ],
    option_prefixes=("-", "@"),
)

# ar operation letters and the modifiers that take a positional operand before the archive
_ARCHIVE_OPERATIONS = "dmpqrstx"
_LINK_OPERATIONS = "qr"
_QUERY_OPERATIONS = "pt"
_POSITION_MODIFIERS = "abi"


class LinkerTool(CompilerTool):
    """Recognizer for linker drivers invoked directly."""

    name = "linker"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(
        r"^([^-]*-)*ld(\.(bfd|gold|lld|mold))?$",
        r"^lld$",
        r"^ld64(\.lld)?$",
        r"^(gold|mold)$",
    )
    FLAG_TABLE = LINKER_FLAG_TABLE

    def build_semantic(self, execution: Execution, matches: Sequence[MatchedArgument]) -> Semantic:
        inputs = [match.flag_token for match in matches if match.is_positional]
        output: Optional[str] = None
        query = False
        for match in matches:
            if match.category is Category.OUTPUT_FILE_MARKER:
                output = match.value
            elif match.category is Category.QUERY_MARKER:
                query = True

        if not inputs:
            if query:
                return QueryOnly(program=execution.program)
            return Unknown(program=execution.program, reason="no input files")

        return Link(
            working_directory=execution.working_directory,
            linker=execution.program,
            inputs=tuple(dict.fromkeys(inputs)),
            flags=tuple(select_flags(matches, LINK_OUTPUT_CATEGORIES)),
            output_file=output,
        )


class ArchiverTool(CompilerTool):
    """Recognizer for static library archivers."""

    name = "archiver"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(r"^([^-]*-)*(gcc-|llvm-)?ar(-?\d+(\.\d+){0,2})?$")
    FLAG_TABLE = ARCHIVER_FLAG_TABLE

    @staticmethod
    def _is_operation(match: MatchedArgument) -> bool:
        """Check if an argument spells the operation (e.g. rcs, -rcs, cru)."""
        if match.category not in (None, Category.UNKNOWN_FLAG):
            return False
        letters = match.flag_token[1:] if match.flag_token.startswith("-") else match.flag_token
        return bool(letters) and letters.isalnum() and any(ch in _ARCHIVE_OPERATIONS for ch in letters)

    def _split_operation(self, matches: Sequence[MatchedArgument]) -> Tuple[Optional[MatchedArgument], List[MatchedArgument]]:
        for index, match in enumerate(matches):
            if self._is_operation(match):
                return match, list(matches[:index]) + list(matches[index + 1 :])
        return None, list(matches)

    def build_semantic(self, execution: Execution, matches: Sequence[MatchedArgument]) -> Semantic:
        operation, rest = self._split_operation(matches)
        if operation is None:
            if any(match.category is Category.QUERY_MARKER for match in rest):
                return QueryOnly(program=execution.program)
            if not rest:
                return Unknown(program=execution.program, reason="no arguments")
            raise MalformedInvocationError(f"{self.name}: no archive operation in {list(execution.flags)}")

        letters = operation.flag_token.lstrip("-")
        code = next(ch for ch in letters if ch in _ARCHIVE_OPERATIONS)
        if code in _QUERY_OPERATIONS:
            return QueryOnly(program=execution.program)
        if code not in _LINK_OPERATIONS:
            return Unknown(program=execution.program, reason=f"archive operation '{code}' has no link semantics")

        positionals = [match.flag_token for match in rest if match.is_positional]
        skip = sum(1 for ch in letters if ch in _POSITION_MODIFIERS) + (1 if "N" in letters else 0)
        if len(positionals) <= skip:
            raise MalformedInvocationError(f"{self.name}: operation '{letters}' without archive name")

        operands = positionals[:skip]
        archive = positionals[skip]
        members = positionals[skip + 1 :]
        flags = [operation.flag_token] + operands + select_flags(rest, LINK_OUTPUT_CATEGORIES)
        return Link(
            working_directory=execution.working_directory,
            linker=execution.program,
            inputs=tuple(dict.fromkeys(members)),
            flags=tuple(flags),
            output_file=archive,
        )
