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
"""Ordered dispatch of executions to toolchain recognizers.

The chain asks each tool in registration order whether it claims the program and
returns the first claiming tool's recognition. When no tool claims the program the
execution is not a compiler call, which is reported as None and is distinct from
any recognition failure.

Registration order is explicit: more specific tools (configured compilers, build
wrappers, MPI wrappers, vendor front ends) come before the generic families that
might also match their program names.
"""

import os
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from semantic.execution import Execution
from semantic.semantic_types import Recognition
from semantic.tool_base import Tool
from semantic.tool_clang import ClangTool
from semantic.tool_fortran import CrayFortranTool, IntelFortranTool
from semantic.tool_gcc import GccTool
from semantic.tool_linker import ArchiverTool, LinkerTool
from semantic.tool_wrapper import CompilerWrapperTool, ConfiguredCompilerTool, MpiWrapperTool

logger = logging.getLogger(__name__)

__all__ = ["ToolChain", "create_compiler_tools", "create_default_tool_chain"]


class ToolChain:
    """Immutable ordered list of tools.

    Args:
        tools: Tools in the order they are tried
        excluded_programs: Program paths that are never treated as compiler calls
    """

    def __init__(self, tools: Sequence[Tool], excluded_programs: Iterable[str] = ()):
        self._tools: Tuple[Tool, ...] = tuple(tools)
        self._excluded = frozenset(os.path.normpath(program) for program in excluded_programs)

    @property
    def tools(self) -> Tuple[Tool, ...]:
        return self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolChain([{', '.join(tool.name for tool in self._tools)}])"

    def is_excluded(self, program: str) -> bool:
        return os.path.normpath(program) in self._excluded

    def find_tool(self, program: str) -> Optional[Tool]:
        """Return the first tool claiming the program, None if none does."""
        if self.is_excluded(program):
            logger.debug("%s is excluded from recognition", program)
            return None
        for tool in self._tools:
            if tool.is_compiler_call(program):
                return tool
        return None

    def classify(self, execution: Execution) -> Optional[Recognition]:
        """Recognize one execution.

        Args:
            execution: Captured process invocation

        Returns:
            Recognition of the first tool claiming the program, None if the
            execution is not a compiler call
        """
        tool = self.find_tool(execution.program)
        if tool is None:
            logger.debug("%s is not a compiler call", execution.program)
            return None
        logger.debug("%s claimed by %s", execution.program, tool.name)
        return tool.recognize(execution)

    def classify_all(self, executions: Iterable[Execution]) -> Iterator[Tuple[Execution, Optional[Recognition]]]:
        """Recognize executions one by one; a failure never stops the others."""
        for execution in executions:
            yield execution, self.classify(execution)


def create_compiler_tools() -> List[Tool]:
    """Create the compiler recognizers in their default order."""
    return [MpiWrapperTool(), CrayFortranTool(), IntelFortranTool(), ClangTool(), GccTool()]


def create_default_tool_chain(configured_compilers: Iterable[ConfiguredCompilerTool] = (), excluded_programs: Iterable[str] = ()) -> ToolChain:
    """Build the default tool chain.

    Order: configured compilers, build wrappers, compiler families, linkers, archivers.
    The build wrappers delegate to a chain of the configured compilers and the
    compiler families.

    Args:
        configured_compilers: Compilers named by the user configuration
        excluded_programs: Program paths that are never compiler calls

    Returns:
        New ToolChain
    """
    excluded = list(excluded_programs)
    configured: List[Tool] = list(configured_compilers)
    families = create_compiler_tools()
    wrapper = CompilerWrapperTool(ToolChain(configured + families, excluded))
    chain = ToolChain(configured + [wrapper] + families + [LinkerTool(), ArchiverTool()], excluded)
    logger.debug("Default tool chain: %r", chain)
    return chain
