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
"""GCC-family compiler driver recognizer.

Covers gcc, g++, cc, c++, gfortran and their cross-compiler and versioned variants
(arm-none-eabi-gcc, x86_64-linux-gnu-g++-13, gcc-12, ...).
"""

import os
import logging
from typing import Dict, List

from semantic.constants import ENV_CPATH, ENV_SYSTEM_INCLUDE_PATHS
from semantic.execution import Execution
from semantic.flag_table import Category, FlagGrammarTable, exact, glued, glued_or_separate, prefix
from semantic.tool_base import C_FAMILY_EXTENSIONS, FORTRAN_EXTENSIONS, CompilerTool

logger = logging.getLogger(__name__)

__all__ = ["GCC_FLAG_TABLE", "GccTool", "environment_include_flags"]

GCC_FLAG_TABLE = FlagGrammarTable(
    "gcc",
    [
        # Stage selection
        exact("-c", Category.COMPILE_MARKER),
        exact("-S", Category.COMPILE_MARKER),
        exact("-E", Category.PREPROCESS_MARKER),
        exact("-M", Category.PREPROCESS_MARKER),
        exact("-MM", Category.PREPROCESS_MARKER),
        glued_or_separate("-o", Category.OUTPUT_FILE_MARKER),
        # Queries
        exact("--version", Category.QUERY_MARKER),
        exact("-v", Category.QUERY_MARKER),
        exact("-###", Category.QUERY_MARKER),
        exact("-dumpversion", Category.QUERY_MARKER),
        exact("-dumpfullversion", Category.QUERY_MARKER),
        exact("-dumpmachine", Category.QUERY_MARKER),
        exact("-dumpspecs", Category.QUERY_MARKER),
        exact("--target-help", Category.QUERY_MARKER),
        prefix("--help", Category.QUERY_MARKER),
        prefix("-print-", Category.QUERY_MARKER),
        # Dependency file generation, irrelevant for the database
        exact("-MD", Category.CONSUMED_NO_OP),
        exact("-MMD", Category.CONSUMED_NO_OP),
        exact("-MP", Category.CONSUMED_NO_OP),
        exact("-MG", Category.CONSUMED_NO_OP),
        glued_or_separate("-MF", Category.CONSUMED_NO_OP),
        glued_or_separate("-MT", Category.CONSUMED_NO_OP),
        glued_or_separate("-MQ", Category.CONSUMED_NO_OP),
        exact("-pipe", Category.CONSUMED_NO_OP),
        prefix("-save-temps", Category.CONSUMED_NO_OP),
        # Auxiliary output naming and driver plumbing
        exact("-dumpbase", Category.CONSUMED_NO_OP, 1),
        exact("-dumpbase-ext", Category.CONSUMED_NO_OP, 1),
        exact("-dumpdir", Category.CONSUMED_NO_OP, 1),
        exact("-aux-info", Category.CONSUMED_NO_OP, 1),
        exact("-wrapper", Category.CONSUMED_NO_OP, 1),
        # Preprocessor
        glued_or_separate("-I", Category.KEPT),
        glued_or_separate("-D", Category.KEPT),
        glued_or_separate("-U", Category.KEPT),
        glued_or_separate("-include", Category.KEPT),
        glued_or_separate("-imacros", Category.KEPT),
        glued_or_separate("-iquote", Category.KEPT),
        glued_or_separate("-isystem", Category.KEPT),
        glued_or_separate("-idirafter", Category.KEPT),
        glued_or_separate("-iprefix", Category.KEPT),
        glued_or_separate("-iwithprefix", Category.KEPT),
        glued_or_separate("-iwithprefixbefore", Category.KEPT),
        glued_or_separate("-isysroot", Category.KEPT),
        glued_or_separate("-imultilib", Category.KEPT),
        glued_or_separate("-imultiarch", Category.KEPT),
        glued_or_separate("-A", Category.KEPT),
        exact("-nostdinc", Category.KEPT),
        exact("-nostdinc++", Category.KEPT),
        exact("-undef", Category.KEPT),
        exact("-trigraphs", Category.KEPT),
        exact("-P", Category.KEPT),
        exact("-C", Category.KEPT),
        exact("-CC", Category.KEPT),
        exact("-H", Category.KEPT),
        prefix("-dM", Category.KEPT),
        exact("-Xpreprocessor", Category.COMPILE_ONLY, 1),
        prefix("-Wp,", Category.COMPILE_ONLY),
        # Language and dialect
        glued_or_separate("-x", Category.KEPT),
        glued("-std=", Category.KEPT),
        exact("-ansi", Category.KEPT),
        exact("-pedantic", Category.KEPT),
        exact("-pedantic-errors", Category.KEPT),
        exact("-w", Category.KEPT),
        prefix("-W", Category.KEPT),
        prefix("-O", Category.KEPT),
        prefix("-g", Category.KEPT),
        prefix("-f", Category.KEPT),
        prefix("-m", Category.KEPT),
        glued_or_separate("--param", Category.KEPT, eq=True),
        exact("-Xassembler", Category.COMPILE_ONLY, 1),
        prefix("-Wa,", Category.COMPILE_ONLY),
        # Affect both compiling and linking
        exact("-pthread", Category.BOTH),
        exact("-fopenmp", Category.BOTH),
        exact("-pg", Category.BOTH),
        exact("--coverage", Category.BOTH),
        exact("-m32", Category.BOTH),
        exact("-m64", Category.BOTH),
        prefix("-flto", Category.BOTH),
        glued("-fsanitize=", Category.BOTH),
        glued("-specs=", Category.BOTH),
        glued_or_separate("--sysroot", Category.BOTH, eq=True),
        glued_or_separate("-B", Category.BOTH),
        # Linking
        glued_or_separate("-l", Category.LINK_ONLY),
        glued_or_separate("-L", Category.LINK_ONLY),
        glued_or_separate("-T", Category.LINK_ONLY),
        glued_or_separate("-u", Category.LINK_ONLY),
        glued_or_separate("-z", Category.LINK_ONLY),
        # Glued -e would swallow unrelated -e... options
        exact("-e", Category.LINK_ONLY, 1),
        glued_or_separate("--entry", Category.LINK_ONLY, eq=True),
        prefix("-Wl,", Category.LINK_ONLY),
        exact("-Xlinker", Category.LINK_ONLY, 1),
        glued("-fuse-ld=", Category.LINK_ONLY),
        exact("-shared", Category.LINK_ONLY),
        exact("-static", Category.LINK_ONLY),
        exact("-static-pie", Category.LINK_ONLY),
        exact("-static-libgcc", Category.LINK_ONLY),
        exact("-static-libstdc++", Category.LINK_ONLY),
        exact("-shared-libgcc", Category.LINK_ONLY),
        exact("-rdynamic", Category.LINK_ONLY),
        exact("-s", Category.LINK_ONLY),
        exact("-pie", Category.LINK_ONLY),
        exact("-no-pie", Category.LINK_ONLY),
        exact("-symbolic", Category.LINK_ONLY),
        exact("-nostdlib", Category.LINK_ONLY),
        exact("-nostartfiles", Category.LINK_ONLY),
        exact("-nodefaultlibs", Category.LINK_ONLY),
        exact("-nolibc", Category.LINK_ONLY),
    ],
    # Response files (@file) are kept as unknown flags, never taken as sources
    option_prefixes=("-", "@"),
)


def environment_include_flags(environment: Dict[str, str]) -> List[str]:
    """Translate include path environment variables into driver flags.

    CPATH entries are searched like -I, the language specific variables like
    -isystem. Empty entries are skipped. Paths are not resolved.

    Args:
        environment: Environment of the execution

    Returns:
        Flags in the order CPATH, C_INCLUDE_PATH, CPLUS_INCLUDE_PATH, OBJC_INCLUDE_PATH
    """
    flags: List[str] = []
    for variable, flag in [(ENV_CPATH, "-I")] + [(name, "-isystem") for name in ENV_SYSTEM_INCLUDE_PATHS]:
        value = environment.get(variable)
        if not value:
            continue
        for directory in value.split(os.pathsep):
            if directory:
                flags.extend([flag, directory])
    return flags


class GccTool(CompilerTool):
    """Recognizer for GCC-compatible compiler drivers."""

    name = "gcc"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(
        r"^(cc|c\+\+|cxx|CC)$",
        r"^([^-]*-)*[mg](cc|\+\+)(-?\d+(\.\d+){0,2})?$",
        r"^([^-]*-)*g?fortran(-?\d+(\.\d+){0,2})?$",
        r"^llvm-g(cc|\+\+)$",
    )
    FLAG_TABLE = GCC_FLAG_TABLE
    SOURCE_EXTENSIONS = {**C_FAMILY_EXTENSIONS, **FORTRAN_EXTENSIONS}
    LANGUAGE_FLAG = "-x"

    def extra_compile_flags(self, execution: Execution) -> List[str]:
        flags = environment_include_flags(dict(execution.environment))
        if flags:
            logger.debug("%s: include flags from environment: %s", self.name, flags)
        return flags
