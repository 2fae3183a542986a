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
"""Vendor Fortran front-end recognizers.

IntelFortranTool covers ifort and ifx, CrayFortranTool the Cray Compiling
Environment driver (ftn, crayftn) and its front end (ftnfe). Both families spell
several options differently from GCC, so each has its own table.
"""

import logging

from semantic.flag_table import Category, FlagGrammarTable, exact, glued, glued_or_separate, prefix
from semantic.tool_base import FORTRAN_EXTENSIONS, CompilerTool

logger = logging.getLogger(__name__)

__all__ = ["INTEL_FORTRAN_FLAG_TABLE", "CRAY_FORTRAN_FLAG_TABLE", "IntelFortranTool", "CrayFortranTool"]

INTEL_FORTRAN_FLAG_TABLE = FlagGrammarTable(
    "intel-fortran",
    [
        exact("-c", Category.COMPILE_MARKER),
        exact("-S", Category.COMPILE_MARKER),
        exact("-syntax-only", Category.COMPILE_MARKER),
        exact("-E", Category.PREPROCESS_MARKER),
        exact("-P", Category.PREPROCESS_MARKER),
        exact("-EP", Category.PREPROCESS_MARKER),
        glued_or_separate("-o", Category.OUTPUT_FILE_MARKER),
        # Treat the operand as a Fortran source whatever its extension
        exact("-Tf", Category.INPUT_FILE_MARKER, 1),
        exact("--version", Category.QUERY_MARKER),
        exact("-V", Category.QUERY_MARKER),
        exact("-dumpmachine", Category.QUERY_MARKER),
        exact("-help", Category.QUERY_MARKER),
        exact("--help", Category.QUERY_MARKER),
        prefix("-gen-dep", Category.CONSUMED_NO_OP),
        glued_or_separate("-I", Category.KEPT),
        glued_or_separate("-D", Category.KEPT),
        glued_or_separate("-U", Category.KEPT),
        exact("-module", Category.COMPILE_ONLY, 1),
        exact("-fpp", Category.KEPT),
        exact("-nofpp", Category.KEPT),
        exact("-free", Category.KEPT),
        exact("-fixed", Category.KEPT),
        exact("-r8", Category.KEPT),
        exact("-i8", Category.KEPT),
        exact("-autodouble", Category.KEPT),
        prefix("-std", Category.KEPT),
        exact("-stand", Category.KEPT, 1),
        exact("-warn", Category.KEPT, 1),
        exact("-check", Category.KEPT, 1),
        exact("-assume", Category.KEPT, 1),
        exact("-diag-disable", Category.KEPT, 1),
        prefix("-fpe", Category.KEPT),
        prefix("-O", Category.KEPT),
        prefix("-g", Category.KEPT),
        prefix("-x", Category.KEPT),
        prefix("-f", Category.KEPT),
        prefix("-m", Category.KEPT),
        prefix("-W", Category.KEPT),
        exact("-qopenmp", Category.BOTH),
        exact("-fopenmp", Category.BOTH),
        prefix("-qmkl", Category.BOTH),
        prefix("-coarray", Category.BOTH),
        glued_or_separate("-l", Category.LINK_ONLY),
        glued_or_separate("-L", Category.LINK_ONLY),
        prefix("-Wl,", Category.LINK_ONLY),
        exact("-Xlinker", Category.LINK_ONLY, 1),
        exact("-shared", Category.LINK_ONLY),
        exact("-static", Category.LINK_ONLY),
        exact("-static-intel", Category.LINK_ONLY),
        exact("-nofor-main", Category.LINK_ONLY),
    ],
    option_prefixes=("-", "@"),
)

CRAY_FORTRAN_FLAG_TABLE = FlagGrammarTable(
    "cray-fortran",
    [
        exact("-c", Category.COMPILE_MARKER),
        exact("-S", Category.COMPILE_MARKER),
        exact("-E", Category.PREPROCESS_MARKER),
        glued_or_separate("-o", Category.OUTPUT_FILE_MARKER),
        exact("-V", Category.QUERY_MARKER),
        exact("--version", Category.QUERY_MARKER),
        # Show the effective options without compiling
        exact("-T", Category.QUERY_MARKER),
        # Module output directory and module search path
        exact("-J", Category.COMPILE_ONLY, 1),
        glued_or_separate("-p", Category.COMPILE_ONLY),
        glued_or_separate("-I", Category.KEPT),
        glued_or_separate("-D", Category.KEPT),
        glued_or_separate("-U", Category.KEPT),
        glued_or_separate("-O", Category.KEPT),
        glued_or_separate("-e", Category.KEPT),
        glued_or_separate("-d", Category.KEPT),
        glued_or_separate("-h", Category.KEPT),
        glued_or_separate("-f", Category.KEPT),
        glued_or_separate("-s", Category.KEPT),
        glued_or_separate("-r", Category.KEPT),
        glued_or_separate("-m", Category.KEPT),
        glued_or_separate("-M", Category.KEPT),
        glued_or_separate("-N", Category.KEPT),
        glued_or_separate("-R", Category.KEPT),
        glued_or_separate("-K", Category.KEPT),
        glued_or_separate("-x", Category.KEPT),
        glued("-G", Category.KEPT),
        exact("-g", Category.KEPT),
        exact("-F", Category.KEPT),
        exact("-fopenmp", Category.BOTH),
        prefix("-Wa,", Category.COMPILE_ONLY),
        prefix("-Wp,", Category.COMPILE_ONLY),
        prefix("-Wl,", Category.LINK_ONLY),
        glued_or_separate("-l", Category.LINK_ONLY),
        glued_or_separate("-L", Category.LINK_ONLY),
        exact("-shared", Category.LINK_ONLY),
        exact("-static", Category.LINK_ONLY),
        exact("-dynamic", Category.LINK_ONLY),
    ],
)


class IntelFortranTool(CompilerTool):
    """Recognizer for the Intel Fortran compilers."""

    name = "intel-fortran"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(r"^(ifort|ifx)(-?\d+(\.\d+){0,2})?$")
    FLAG_TABLE = INTEL_FORTRAN_FLAG_TABLE
    SOURCE_EXTENSIONS = FORTRAN_EXTENSIONS


class CrayFortranTool(CompilerTool):
    """Recognizer for the Cray Fortran driver and front end."""

    name = "cray-fortran"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(r"^(crayftn|ftn|ftnfe)$")
    FLAG_TABLE = CRAY_FORTRAN_FLAG_TABLE
    SOURCE_EXTENSIONS = FORTRAN_EXTENSIONS
