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
"""Recognizer interface and the generic compiler-driver classifier.

A Tool decides whether a program belongs to its toolchain family and, if it does,
turns the execution into a Semantic value using its own flag grammar table. Tools
are stateless: the only data they hold is built once at construction time.
"""

import os
import re
import abc
import logging
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from semantic.arg_parser import MatchedArgument, parse_arguments
from semantic.constants import MalformedInvocationError, NotApplicableError, RecognitionError
from semantic.execution import Execution
from semantic.flag_table import COMPILE_OUTPUT_CATEGORIES, LINK_OUTPUT_CATEGORIES, Category, FlagGrammarTable
from semantic.semantic_types import Compile, Link, Preprocess, QueryOnly, Recognition, Semantic, Unknown

logger = logging.getLogger(__name__)

__all__ = ["Tool", "CompilerTool", "program_basename", "matches_program", "select_flags"]

# Language names follow the values accepted by GCC's -x option
C_FAMILY_EXTENSIONS: Dict[str, str] = {
    ".c": "c",
    ".i": "cpp-output",
    ".cc": "c++",
    ".cp": "c++",
    ".cpp": "c++",
    ".cxx": "c++",
    ".c++": "c++",
    ".C": "c++",
    ".CC": "c++",
    ".CPP": "c++",
    ".C++": "c++",
    ".ii": "c++-cpp-output",
    ".txx": "c++",
    ".cppm": "c++",
    ".ixx": "c++",
    ".m": "objective-c",
    ".mi": "objective-c-cpp-output",
    ".mm": "objective-c++",
    ".M": "objective-c++",
    ".mii": "objective-c++-cpp-output",
    ".s": "assembler",
    ".S": "assembler-with-cpp",
    ".sx": "assembler-with-cpp",
}

FORTRAN_EXTENSIONS: Dict[str, str] = {
    ext: "fortran"
    for ext in (
        ".f",
        ".for",
        ".ftn",
        ".fpp",
        ".f77",
        ".f90",
        ".f95",
        ".f03",
        ".f08",
        ".F",
        ".FOR",
        ".FTN",
        ".FPP",
        ".F77",
        ".F90",
        ".F95",
        ".F03",
        ".F08",
    )
}

_STAGE_MARKERS = (Category.PREPROCESS_MARKER, Category.COMPILE_MARKER)

STDIN_INPUT = "-"


def program_basename(program: str) -> str:
    """Return the program name without directory and without a Windows .exe suffix."""
    name = os.path.basename(program)
    if name.lower().endswith(".exe"):
        name = name[:-4]
    return name


def matches_program(program: str, patterns: Sequence[Pattern[str]]) -> bool:
    """Check the program basename against name patterns.

    Purely syntactic; the filesystem is never consulted.
    """
    name = program_basename(program)
    return any(pattern.match(name) for pattern in patterns)


def select_flags(matches: Sequence[MatchedArgument], categories: frozenset) -> List[str]:
    """Return the verbatim tokens of all flags in the given categories, in order."""
    return [token for match in matches if match.category in categories for token in match.tokens]


class Tool(abc.ABC):
    """Recognizer for one toolchain family."""

    name = "tool"

    @abc.abstractmethod
    def is_compiler_call(self, program: str) -> bool:
        """Cheap syntactic check whether the program belongs to this family."""

    @abc.abstractmethod
    def classify(self, execution: Execution) -> Semantic:
        """Classify an execution already known to belong to this family.

        Raises:
            RecognitionError: If the arguments cannot be parsed or classified
        """

    def recognize(self, execution: Execution) -> Recognition:
        """Recognize an execution.

        Args:
            execution: Captured process invocation

        Returns:
            Recognition with the Semantic, or with the failure kind
        """
        if not self.is_compiler_call(execution.program):
            return Recognition.failure(self.name, NotApplicableError(f"{execution.program} is not a {self.name} program"))

        try:
            semantic = self.classify(execution)
        except RecognitionError as e:
            logger.debug("%s: failed to recognize %s: %s", self.name, execution.arguments, e)
            return Recognition.failure(self.name, e)

        logger.debug("%s: recognized %s as %s", self.name, execution.program, semantic.kind)
        return Recognition.success(self.name, semantic)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CompilerTool(Tool):
    """Compiler driver recognizer parameterized by class attributes.

    Subclasses set PROGRAM_PATTERNS, FLAG_TABLE and SOURCE_EXTENSIONS. LANGUAGE_FLAG
    names the flag that overrides the source language (None if the family has none).

    Classification of the parsed arguments, in order:
        1. query marker, no stage marker, no inputs     -> QueryOnly
        2. only "-" (standard input) as source         -> Unknown
        3. stage marker together with link-only flags  -> MalformedInvocation
        4. preprocess marker                           -> Preprocess (needs a source)
        5. compile marker                              -> Compile (needs a source)
        6. any source input                            -> Compile
        7. only object or library inputs               -> Link
        8. nothing to work on                          -> Unknown
    """

    name = "compiler"
    PROGRAM_PATTERNS: Tuple[Pattern[str], ...] = ()
    FLAG_TABLE: FlagGrammarTable = FlagGrammarTable("empty", [])
    SOURCE_EXTENSIONS: Dict[str, str] = {}
    LANGUAGE_FLAG: Optional[str] = None

    def is_compiler_call(self, program: str) -> bool:
        return matches_program(program, self.PROGRAM_PATTERNS)

    def source_language(self, path: str) -> Optional[str]:
        """Language of a source file by extension, None if it is not a source."""
        _, extension = os.path.splitext(path)
        return self.SOURCE_EXTENSIONS.get(extension)

    def extra_compile_flags(self, execution: Execution) -> List[str]:
        """Flags implied by the execution context (e.g. environment), appended to compile flags."""
        return []

    def classify(self, execution: Execution) -> Semantic:
        matches = parse_arguments(execution.flags, self.FLAG_TABLE)
        return self.build_semantic(execution, matches)

    def build_semantic(self, execution: Execution, matches: Sequence[MatchedArgument]) -> Semantic:
        """Turn parsed arguments into a Semantic value.

        Raises:
            MalformedInvocationError: If the call has conflicting intent or lacks inputs
        """
        sources: List[str] = []
        others: List[str] = []
        markers = set()
        output: Optional[str] = None
        has_link_flags = False
        language_override: Optional[str] = None
        language: Optional[str] = None
        reads_stdin = False

        for match in matches:
            if match.is_positional:
                path = match.flag_token
                if path == STDIN_INPUT:
                    # Source on standard input has no file for a database entry
                    reads_stdin = True
                    continue
                detected = language_override or self.source_language(path)
                if detected is None:
                    others.append(path)
                    continue
                if not sources:
                    language = detected
                sources.append(path)
            elif match.category is Category.INPUT_FILE_MARKER:
                path = match.value or ""
                if not sources:
                    language = self.source_language(path)
                sources.append(path)
            elif match.category is Category.OUTPUT_FILE_MARKER:
                output = match.value
            elif match.category is Category.LINK_ONLY:
                has_link_flags = True
            elif match.category in (Category.COMPILE_MARKER, Category.PREPROCESS_MARKER, Category.QUERY_MARKER):
                markers.add(match.category)

            if self.LANGUAGE_FLAG is not None and match.rule is not None and match.rule.spelling == self.LANGUAGE_FLAG:
                language_override = None if match.value == "none" else match.value

        stage = next((marker for marker in _STAGE_MARKERS if marker in markers), None)
        if Category.QUERY_MARKER in markers and stage is None and not sources and not others and not reads_stdin:
            return QueryOnly(program=execution.program)

        if reads_stdin and not sources:
            return Unknown(program=execution.program, reason="source read from standard input")

        if stage is not None and has_link_flags:
            raise MalformedInvocationError(f"{self.name}: {stage.value} together with link-only flags")

        if stage is not None or sources:
            if not sources:
                raise MalformedInvocationError(f"{self.name}: {stage.value} without input file")
            if stage is not None and output is not None and len(sources) > 1:
                raise MalformedInvocationError(f"{self.name}: one output file for {len(sources)} sources")

            flags = tuple(select_flags(matches, COMPILE_OUTPUT_CATEGORIES) + self.extra_compile_flags(execution))
            semantic_type = Preprocess if stage is Category.PREPROCESS_MARKER else Compile
            return semantic_type(
                working_directory=execution.working_directory,
                compiler=execution.program,
                source_files=tuple(sources),
                flags=flags,
                # Without a stage marker the output is the linked binary, not an object
                output_file=output if stage is not None else None,
                language=language,
            )

        if others:
            return Link(
                working_directory=execution.working_directory,
                linker=execution.program,
                inputs=tuple(dict.fromkeys(others)),
                flags=tuple(select_flags(matches, LINK_OUTPUT_CATEGORIES)),
                output_file=output,
            )

        return Unknown(program=execution.program, reason="no input files")

    @staticmethod
    def compile_patterns(*patterns: str) -> Tuple[Pattern[str], ...]:
        return tuple(re.compile(pattern) for pattern in patterns)
