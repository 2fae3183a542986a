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
"""Clang-family compiler driver recognizer.

Clang accepts the GCC driver grammar plus its own options, so its table is derived
from the GCC table. The derived table is a separate instance owned by ClangTool.
"""

import logging

from semantic.execution import Execution
from semantic.flag_table import Category, exact, glued, glued_or_separate, prefix
from semantic.semantic_types import Semantic, Unknown
from semantic.tool_base import C_FAMILY_EXTENSIONS, CompilerTool
from semantic.tool_gcc import GCC_FLAG_TABLE, GccTool

logger = logging.getLogger(__name__)

__all__ = ["CLANG_FLAG_TABLE", "ClangTool"]

# Internal frontend invocations spawned by the driver
CLANG_FRONTEND_FLAGS = ("-cc1", "-cc1as")

CLANG_FLAG_TABLE = GCC_FLAG_TABLE.derive(
    "clang",
    [
        exact("--analyze", Category.COMPILE_MARKER),
        exact("-fsyntax-only", Category.COMPILE_MARKER),
        exact("-emit-llvm", Category.KEPT),
        exact("-Xclang", Category.COMPILE_ONLY, 1),
        prefix("-Xarch_", Category.KEPT, 1),
        exact("-Xcuda-ptxas", Category.COMPILE_ONLY, 1),
        glued_or_separate("--target", Category.BOTH, eq=True),
        exact("-target", Category.BOTH, 1),
        glued_or_separate("-MJ", Category.CONSUMED_NO_OP),
        glued_or_separate("--serialize-diagnostics", Category.CONSUMED_NO_OP),
        glued_or_separate("-ivfsoverlay", Category.KEPT),
        glued_or_separate("-iframework", Category.KEPT),
        glued_or_separate("-F", Category.KEPT),
        glued("--cuda-path=", Category.KEPT),
        glued("--offload-arch=", Category.KEPT),
        glued("--ld-path=", Category.LINK_ONLY),
        glued("-rtlib=", Category.LINK_ONLY),
        glued("-unwindlib=", Category.LINK_ONLY),
    ],
)


class ClangTool(GccTool):
    """Recognizer for Clang compiler drivers.

    Shares the GCC environment handling (CPATH and friends are honored by clang too).
    """

    name = "clang"
    PROGRAM_PATTERNS = CompilerTool.compile_patterns(
        r"^([^-]*-)*clang(|\+\+)(-?\d+(\.\d+){0,2})?$",
    )
    FLAG_TABLE = CLANG_FLAG_TABLE
    SOURCE_EXTENSIONS = {**C_FAMILY_EXTENSIONS, ".cu": "cuda", ".hip": "hip", ".cl": "cl"}

    def classify(self, execution: Execution) -> Semantic:
        if execution.flags[:1] and execution.flags[0] in CLANG_FRONTEND_FLAGS:
            return Unknown(program=execution.program, reason=f"internal {execution.flags[0]} frontend invocation")
        return super().classify(execution)
