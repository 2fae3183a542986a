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
"""Tests for semantic/tool_linker.py"""

from typing import Callable

import pytest

from semantic.execution import Execution
from semantic.semantic_types import ErrorKind, Link, QueryOnly, Unknown
from semantic.tool_linker import ArchiverTool, LinkerTool


@pytest.fixture(scope="module")
def linker() -> LinkerTool:
    return LinkerTool()


@pytest.fixture(scope="module")
def archiver() -> ArchiverTool:
    return ArchiverTool()


@pytest.mark.unit
class TestLinkerTool:
    """Tests for direct linker invocations."""

    @pytest.mark.parametrize("program", ["ld", "/usr/bin/ld.gold", "ld.lld", "lld", "mold", "arm-none-eabi-ld", "ld64.lld"])
    def test_claims_linkers(self, linker: LinkerTool, program: str) -> None:
        """Test that linker names are claimed."""
        assert linker.is_compiler_call(program)

    @pytest.mark.parametrize("program", ["ldd", "gold-standard", "gcc", "ar"])
    def test_ignores_others(self, linker: LinkerTool, program: str) -> None:
        """Test that similar names are not claimed."""
        assert not linker.is_compiler_call(program)

    def test_link(self, linker: LinkerTool, make_execution: Callable[..., Execution]) -> None:
        """Test ld -o app crt1.o main.o -L/usr/lib -lc."""
        semantic = linker.recognize(make_execution("ld", "-o", "app", "crt1.o", "main.o", "-L/usr/lib", "-lc")).unwrap()

        assert isinstance(semantic, Link)
        assert semantic.inputs == ("crt1.o", "main.o")
        assert semantic.output_file == "app"
        assert semantic.flags == ("-L/usr/lib", "-lc")

    def test_sources_are_plain_inputs(self, linker: LinkerTool, make_execution: Callable[..., Execution]) -> None:
        """Test that a linker never compiles, whatever the input extension."""
        semantic = linker.recognize(make_execution("ld", "foo.c")).unwrap()
        assert isinstance(semantic, Link)
        assert semantic.inputs == ("foo.c",)

    def test_version(self, linker: LinkerTool, make_execution: Callable[..., Execution]) -> None:
        """Test ld --version."""
        assert isinstance(linker.recognize(make_execution("ld", "--version")).unwrap(), QueryOnly)

    def test_no_inputs(self, linker: LinkerTool, make_execution: Callable[..., Execution]) -> None:
        """Test that flags without inputs are Unknown."""
        assert isinstance(linker.recognize(make_execution("ld", "-shared")).unwrap(), Unknown)

    def test_rpath_operand_not_input(self, linker: LinkerTool, make_execution: Callable[..., Execution]) -> None:
        """Test that -rpath consumes its directory."""
        semantic = linker.recognize(make_execution("ld.lld", "-rpath", "/opt/lib", "a.o")).unwrap()
        assert semantic.inputs == ("a.o",)
        assert semantic.flags == ("-rpath", "/opt/lib")


@pytest.mark.unit
class TestArchiverTool:
    """Tests for archiver invocations."""

    @pytest.mark.parametrize("program", ["ar", "/usr/bin/llvm-ar", "gcc-ar", "x86_64-linux-gnu-ar", "llvm-ar-15"])
    def test_claims_archivers(self, archiver: ArchiverTool, program: str) -> None:
        """Test that archiver names are claimed."""
        assert archiver.is_compiler_call(program)

    @pytest.mark.parametrize("program", ["tar", "arm", "ranlib"])
    def test_ignores_others(self, archiver: ArchiverTool, program: str) -> None:
        """Test that similar names are not claimed."""
        assert not archiver.is_compiler_call(program)

    def test_create_archive(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test ar rcs libfoo.a foo.o bar.o."""
        semantic = archiver.recognize(make_execution("ar", "rcs", "libfoo.a", "foo.o", "bar.o")).unwrap()

        assert isinstance(semantic, Link)
        assert semantic.output_file == "libfoo.a"
        assert semantic.inputs == ("foo.o", "bar.o")
        assert semantic.flags == ("rcs",)

    def test_dashed_operation(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test llvm-ar -qc with a dash."""
        semantic = archiver.recognize(make_execution("llvm-ar", "-qc", "libx.a", "x.o")).unwrap()
        assert semantic.output_file == "libx.a"
        assert semantic.inputs == ("x.o",)

    def test_position_modifier(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that the a/b/i modifiers take a member name before the archive."""
        semantic = archiver.recognize(make_execution("ar", "rb", "first.o", "libx.a", "new.o")).unwrap()
        assert semantic.output_file == "libx.a"
        assert semantic.inputs == ("new.o",)
        assert semantic.flags == ("rb", "first.o")

    def test_list_is_query(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that ar t lists members only."""
        assert isinstance(archiver.recognize(make_execution("ar", "t", "libx.a")).unwrap(), QueryOnly)

    def test_extract_is_unknown(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that extraction has no link meaning."""
        semantic = archiver.recognize(make_execution("ar", "x", "libx.a")).unwrap()
        assert isinstance(semantic, Unknown)

    def test_missing_archive(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that an operation without archive name is malformed."""
        result = archiver.recognize(make_execution("ar", "rcs"))
        assert result.error_kind is ErrorKind.MALFORMED_INVOCATION

    def test_version(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test ar --version."""
        assert isinstance(archiver.recognize(make_execution("ar", "--version")).unwrap(), QueryOnly)

    def test_no_arguments(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that a bare ar call is Unknown."""
        assert isinstance(archiver.recognize(make_execution("ar")).unwrap(), Unknown)

    def test_no_operation(self, archiver: ArchiverTool, make_execution: Callable[..., Execution]) -> None:
        """Test that arguments without an operation are malformed."""
        result = archiver.recognize(make_execution("ar", "libx.a", "x.o"))
        assert result.error_kind is ErrorKind.MALFORMED_INVOCATION
