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
"""Recognizers for programs that stand in front of a real compiler.

- CompilerWrapperTool: build wrappers (ccache, distcc, icecc, sccache) that take the
  real compiler command as their arguments. The wrapper is stripped and the inner
  command is recognized by a separate chain of compiler tools.
- MpiWrapperTool: MPI compiler wrapper scripts (mpicc, mpif90, ...) that accept the
  GCC driver grammar plus a few query options of their own.
- ConfiguredCompilerTool: a compiler named explicitly by the user configuration,
  with flags to add to or remove from every recognized call.
"""

import os
import dataclasses
import re
import logging
from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple

from semantic.execution import Execution
from semantic.flag_table import Category, exact, prefix
from semantic.semantic_types import Compile, Link, Preprocess, QueryOnly, Semantic, Unknown
from semantic.tool_base import CompilerTool, Tool, program_basename
from semantic.tool_gcc import GCC_FLAG_TABLE, GccTool

if TYPE_CHECKING:
    from semantic.tool_chain import ToolChain

logger = logging.getLogger(__name__)

__all__ = ["BUILD_WRAPPERS", "MPI_FLAG_TABLE", "CompilerWrapperTool", "MpiWrapperTool", "ConfiguredCompilerTool"]

# Build wrappers that take the compiler command as arguments
BUILD_WRAPPERS = ("ccache", "distcc", "icecc", "sccache", "buildcache")

# ccache accepts configuration settings before the compiler (e.g. sloppiness=time_macros)
_WRAPPER_SETTING = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=[^/]*$")

MPI_FLAG_TABLE = GCC_FLAG_TABLE.derive(
    "mpi",
    [
        # Open MPI
        prefix("-showme", Category.QUERY_MARKER),
        prefix("--showme", Category.QUERY_MARKER),
        # MPICH
        exact("-show", Category.QUERY_MARKER),
        exact("-compile-info", Category.QUERY_MARKER),
        exact("-link-info", Category.QUERY_MARKER),
        exact("-compile_info", Category.QUERY_MARKER),
        exact("-link_info", Category.QUERY_MARKER),
    ],
)


def _is_build_wrapper(program: str) -> bool:
    return program_basename(program).lower() in BUILD_WRAPPERS


class CompilerWrapperTool(Tool):
    """Recognizer for build wrappers delegating to an inner compiler.

    Args:
        compilers: Chain of compiler tools used for the wrapped command
    """

    name = "wrapper"

    def __init__(self, compilers: "ToolChain"):
        self._compilers = compilers

    @property
    def compilers(self) -> "ToolChain":
        return self._compilers

    def is_compiler_call(self, program: str) -> bool:
        return _is_build_wrapper(program)

    def unwrap_command(self, arguments: Sequence[str]) -> List[str]:
        """Strip wrappers and wrapper settings from the front of a command.

        Args:
            arguments: Full argument vector, argv[0] is the wrapper

        Returns:
            The wrapped command, empty when the wrapper was called on its own
        """
        command = list(arguments)
        while command and _is_build_wrapper(command[0]):
            command = command[1:]
            while command and _WRAPPER_SETTING.match(command[0]):
                logger.debug("%s: dropping wrapper setting %s", self.name, command[0])
                command = command[1:]
        return command

    def classify(self, execution: Execution) -> Semantic:
        command = self.unwrap_command(execution.arguments)
        if not command or command[0].startswith("-"):
            # The wrapper's own options (ccache -s, distcc --help, ...)
            return QueryOnly(program=execution.program)

        recognition = self._compilers.classify(execution.with_command(command))
        if recognition is None:
            return Unknown(program=execution.program, reason=f"wrapped program {command[0]} is not a known compiler")
        return recognition.unwrap()

    def __repr__(self) -> str:
        return f"CompilerWrapperTool({self._compilers!r})"


class MpiWrapperTool(GccTool):
    """Recognizer for MPI compiler wrapper scripts."""

    name = "mpi-wrapper"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(r"^mpi(cc|cxx|c\+\+|CC|f77|f90|f08|fort)$")
    FLAG_TABLE = MPI_FLAG_TABLE


class ConfiguredCompilerTool(GccTool):
    """Recognizer for one compiler executable named in the configuration.

    The program path has to match exactly (after normalization). The GCC driver
    grammar is used for its arguments.

    Args:
        executable: Path of the compiler executable
        flags_to_add: Flags appended to every recognized call
        flags_to_remove: Flags dropped from every recognized call
    """

    name = "configured"

    def __init__(self, executable: str, flags_to_add: Iterable[str] = (), flags_to_remove: Iterable[str] = ()):
        self._executable = os.path.normpath(executable)
        self._flags_to_add: Tuple[str, ...] = tuple(flags_to_add)
        self._flags_to_remove = frozenset(flags_to_remove)

    @property
    def executable(self) -> str:
        return self._executable

    def is_compiler_call(self, program: str) -> bool:
        return os.path.normpath(program) == self._executable

    def adjust_flags(self, flags: Sequence[str]) -> Tuple[str, ...]:
        kept = [flag for flag in flags if flag not in self._flags_to_remove]
        return tuple(kept) + self._flags_to_add

    def classify(self, execution: Execution) -> Semantic:
        semantic = super().classify(execution)
        if isinstance(semantic, (Compile, Preprocess, Link)):
            return dataclasses.replace(semantic, flags=self.adjust_flags(semantic.flags))
        return semantic

    def __repr__(self) -> str:
        return f"ConfiguredCompilerTool({self._executable!r})"
