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
"""Tests for semantic/compilation_db.py"""

import os
import json
from typing import List, Optional

import pytest

from semantic.compilation_db import Entry, deduplicate_entries, entry_to_dict, filter_entries, semantic_to_entries, write_compilation_database
from semantic.constants import ExportError
from semantic.semantic_types import Compile, Link, Preprocess, QueryOnly, Unknown


def make_entry(file: str, output: Optional[str] = None, arguments: Optional[List[str]] = None, directory: str = "/src") -> Entry:
    return Entry(directory=directory, file=file, arguments=tuple(arguments or ["cc", "-c", file]), output=output)


@pytest.mark.unit
class TestSemanticToEntries:
    """Tests for semantic_to_entries."""

    def test_compile(self) -> None:
        """Test one entry for a compile with output."""
        semantic = Compile(working_directory="/src", compiler="/usr/bin/gcc", source_files=("foo.c",), flags=("-Wall",), output_file="obj/foo.o")
        (entry,) = semantic_to_entries(semantic)

        assert entry.directory == "/src"
        assert entry.file == "/src/foo.c"
        assert entry.arguments == ("/usr/bin/gcc", "-c", "-Wall", "foo.c", "-o", "obj/foo.o")
        assert entry.output == "/src/obj/foo.o"

    def test_compile_many_sources(self) -> None:
        """Test one entry per source, in order."""
        semantic = Compile(working_directory="/src", compiler="cc", source_files=("a.c", "/abs/b.c"))
        entries = semantic_to_entries(semantic)

        assert [e.file for e in entries] == ["/src/a.c", "/abs/b.c"]
        assert entries[1].arguments == ("cc", "-c", "/abs/b.c")
        assert all(e.output is None for e in entries)

    def test_preprocess(self) -> None:
        """Test that preprocess entries use -E."""
        semantic = Preprocess(working_directory="/src", compiler="cc", source_files=("a.c",))
        (entry,) = semantic_to_entries(semantic)
        assert entry.arguments == ("cc", "-E", "a.c")

    def test_link_skipped_by_default(self) -> None:
        """Test that links produce no entries unless requested."""
        semantic = Link(working_directory="/src", linker="cc", inputs=("a.o", "b.o"), flags=("-lm",), output_file="app")
        assert semantic_to_entries(semantic) == []

    def test_link_included(self) -> None:
        """Test one entry per link input when links are requested."""
        semantic = Link(working_directory="/src", linker="cc", inputs=("a.o", "b.o"), flags=("-lm",), output_file="app")
        entries = semantic_to_entries(semantic, include_links=True)

        assert [e.file for e in entries] == ["/src/a.o", "/src/b.o"]
        assert entries[0].arguments == ("cc", "-lm", "a.o", "b.o", "-o", "app")
        assert entries[0].output == "/src/app"

    def test_query_and_unknown_skipped(self) -> None:
        """Test that queries and unknown calls produce no entries."""
        assert semantic_to_entries(QueryOnly(program="cc"), include_links=True) == []
        assert semantic_to_entries(Unknown(program="cc"), include_links=True) == []

    def test_relative_paths_normalized(self) -> None:
        """Test that ../ components are resolved lexically."""
        semantic = Compile(working_directory="/src/build/", compiler="cc", source_files=("../lib/a.c",))
        (entry,) = semantic_to_entries(semantic)
        assert entry.directory == "/src/build"
        assert entry.file == "/src/lib/a.c"


@pytest.mark.unit
class TestFilterEntries:
    """Tests for filter_entries."""

    def test_no_filters(self) -> None:
        """Test that everything is kept without filters."""
        entries = [make_entry("/src/a.c"), make_entry("/other/b.c")]
        assert filter_entries(entries) == entries

    def test_include(self) -> None:
        """Test that only included directories are kept."""
        entries = [make_entry("/src/a.c"), make_entry("/srcx/b.c"), make_entry("/other/c.c")]
        assert [e.file for e in filter_entries(entries, paths_to_include=["/src"])] == ["/src/a.c"]

    def test_exclude_wins(self) -> None:
        """Test that exclusion applies inside included directories."""
        entries = [make_entry("/src/a.c"), make_entry("/src/third_party/z.c")]
        result = filter_entries(entries, paths_to_include=["/src/"], paths_to_exclude=["/src/third_party"])
        assert [e.file for e in result] == ["/src/a.c"]


@pytest.mark.unit
class TestDeduplicateEntries:
    """Tests for deduplicate_entries."""

    def test_file_output(self) -> None:
        """Test the default duplicate key (file and output)."""
        entries = [make_entry("/src/a.c", "/src/a.o"), make_entry("/src/a.c", "/src/a.o", ["cc", "-O2", "a.c"]), make_entry("/src/a.c", "/src/a.pic.o")]
        result = deduplicate_entries(entries)
        assert len(result) == 2
        assert result[0] is entries[0]

    def test_file(self) -> None:
        """Test deduplication by file only."""
        entries = [make_entry("/src/a.c", "/src/a.o"), make_entry("/src/a.c", "/src/a.pic.o")]
        assert deduplicate_entries(entries, "file") == [entries[0]]

    def test_all(self) -> None:
        """Test that 'all' keeps entries differing in arguments."""
        entries = [make_entry("/src/a.c"), make_entry("/src/a.c", arguments=["cc", "-g", "a.c"]), make_entry("/src/a.c")]
        assert len(deduplicate_entries(entries, "all")) == 2

    def test_unknown_fields(self) -> None:
        """Test that an unknown selection raises ValueError."""
        with pytest.raises(ValueError, match="Unknown duplicate filter"):
            deduplicate_entries([make_entry("/src/a.c")], "path")


@pytest.mark.unit
class TestWriteCompilationDatabase:
    """Tests for entry serialization and writing."""

    def test_entry_to_dict(self) -> None:
        """Test the default JSON shape."""
        entry = make_entry("/src/a.c", "/src/a.o", ["cc", "-c", "a.c", "-o", "a.o"])
        assert entry_to_dict(entry) == {"directory": "/src", "file": "/src/a.c", "arguments": ["cc", "-c", "a.c", "-o", "a.o"], "output": "/src/a.o"}

    def test_entry_to_dict_command_string(self) -> None:
        """Test the command string form with quoting."""
        entry = make_entry("/src/a.c", arguments=["cc", "-DNAME=a b", "-c", "a.c"])
        data = entry_to_dict(entry, command_as_array=False)
        assert data["command"] == "cc '-DNAME=a b' -c a.c"
        assert "arguments" not in data
        assert "output" not in data

    def test_drop_output_field(self) -> None:
        """Test that the output field can be dropped."""
        entry = make_entry("/src/a.c", "/src/a.o")
        assert "output" not in entry_to_dict(entry, drop_output_field=True)

    def test_write(self, temp_dir: str) -> None:
        """Test writing a database file."""
        path = os.path.join(temp_dir, "compile_commands.json")
        count = write_compilation_database(path, [make_entry("/src/a.c"), make_entry("/src/b.c")])

        assert count == 2
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        assert [item["file"] for item in data] == ["/src/a.c", "/src/b.c"]

    def test_write_empty(self, temp_dir: str) -> None:
        """Test that no entries give an empty JSON array."""
        path = os.path.join(temp_dir, "compile_commands.json")
        assert write_compilation_database(path, []) == 0
        with open(path, "r", encoding="utf-8") as f:
            assert json.load(f) == []

    def test_write_unwritable(self, temp_dir: str) -> None:
        """Test that a write failure raises ExportError with exit code 2."""
        path = os.path.join(temp_dir, "missing", "compile_commands.json")
        with pytest.raises(ExportError, match="Failed to write") as excinfo:
            write_compilation_database(path, [make_entry("/src/a.c")])
        assert excinfo.value.exit_code == 2
