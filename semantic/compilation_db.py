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
"""Conversion of recognition results into compilation database entries.

One entry is produced per source file of a Compile or Preprocess result, and, when
requested, per input of a Link result. QueryOnly and Unknown results produce no
entries. Paths are made absolute against the working directory lexically; the
filesystem is never consulted.

Example entry (JSON):
    {"directory": "/src", "file": "/src/foo.c", "arguments": ["gcc", "-c", "-Wall", "foo.c", "-o", "foo.o"], "output": "/src/foo.o"}
"""

import os
import json
import shlex
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from semantic.constants import DUPLICATE_FILTER_ALL, DUPLICATE_FILTER_FILE, DUPLICATE_FILTER_FILE_OUTPUT, ExportError
from semantic.semantic_types import Compile, Link, Preprocess, Semantic

logger = logging.getLogger(__name__)

__all__ = ["Entry", "semantic_to_entries", "filter_entries", "deduplicate_entries", "entry_to_dict", "write_compilation_database"]


@dataclass(frozen=True)
class Entry:
    """One compilation database record.

    Attributes:
        directory: Working directory of the command
        file: Absolute path of the main input
        arguments: Command as argument vector
        output: Absolute path of the output, if known
    """

    directory: str
    file: str
    arguments: Tuple[str, ...]
    output: Optional[str] = None


def _absolute(directory: str, path: str) -> str:
    return os.path.normpath(os.path.join(directory, path))


def _source_entries(semantic: Any, stage_flag: str) -> List[Entry]:
    directory = os.path.normpath(semantic.working_directory)
    output = _absolute(directory, semantic.output_file) if semantic.output_file else None
    entries = []
    for source in semantic.source_files:
        arguments = [semantic.compiler, stage_flag, *semantic.flags, source]
        if semantic.output_file:
            arguments.extend(["-o", semantic.output_file])
        entries.append(Entry(directory=directory, file=_absolute(directory, source), arguments=tuple(arguments), output=output))
    return entries


def _link_entries(semantic: Link) -> List[Entry]:
    directory = os.path.normpath(semantic.working_directory)
    arguments = [semantic.linker, *semantic.flags, *semantic.inputs]
    output = None
    if semantic.output_file:
        arguments.extend(["-o", semantic.output_file])
        output = _absolute(directory, semantic.output_file)
    return [Entry(directory=directory, file=_absolute(directory, path), arguments=tuple(arguments), output=output) for path in semantic.inputs]


def semantic_to_entries(semantic: Semantic, include_links: bool = False) -> List[Entry]:
    """Convert one recognition result into database entries.

    Args:
        semantic: Recognized meaning of an execution
        include_links: Also convert Link results

    Returns:
        Entries in source order; empty for results without compile actions
    """
    if isinstance(semantic, Compile):
        return _source_entries(semantic, "-c")
    if isinstance(semantic, Preprocess):
        return _source_entries(semantic, "-E")
    if isinstance(semantic, Link) and include_links:
        return _link_entries(semantic)
    return []


def _is_under(path: str, directory: str) -> bool:
    directory = os.path.normpath(directory)
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)


def filter_entries(entries: Iterable[Entry], paths_to_include: Sequence[str] = (), paths_to_exclude: Sequence[str] = ()) -> List[Entry]:
    """Keep entries whose file is under an included directory and not under an excluded one.

    Args:
        entries: Entries to filter
        paths_to_include: Directories to keep (empty keeps everything)
        paths_to_exclude: Directories to drop

    Returns:
        Filtered entries, order preserved
    """
    result = []
    for entry in entries:
        if paths_to_include and not any(_is_under(entry.file, path) for path in paths_to_include):
            continue
        if any(_is_under(entry.file, path) for path in paths_to_exclude):
            logger.debug("Excluding entry for %s", entry.file)
            continue
        result.append(entry)
    return result


def _duplicate_key(entry: Entry, fields: str) -> Tuple[Any, ...]:
    if fields == DUPLICATE_FILTER_FILE:
        return (entry.file,)
    if fields == DUPLICATE_FILTER_FILE_OUTPUT:
        return (entry.file, entry.output)
    if fields == DUPLICATE_FILTER_ALL:
        return (entry.directory, entry.file, entry.arguments, entry.output)
    raise ValueError(f"Unknown duplicate filter fields: {fields}")


def deduplicate_entries(entries: Iterable[Entry], fields: str = DUPLICATE_FILTER_FILE_OUTPUT) -> List[Entry]:
    """Drop entries equal to an earlier one in the selected fields; the first one wins.

    Args:
        entries: Entries in generation order
        fields: One of "file", "file_output", "all"

    Returns:
        Entries without duplicates

    Raises:
        ValueError: If fields is not a known selection
    """
    seen = set()
    result = []
    for entry in entries:
        key = _duplicate_key(entry, fields)
        if key in seen:
            logger.debug("Dropping duplicate entry for %s", entry.file)
            continue
        seen.add(key)
        result.append(entry)
    return result


def entry_to_dict(entry: Entry, command_as_array: bool = True, drop_output_field: bool = False) -> Dict[str, Any]:
    """Return the JSON representation of an entry."""
    data: Dict[str, Any] = {"directory": entry.directory, "file": entry.file}
    if command_as_array:
        data["arguments"] = list(entry.arguments)
    else:
        data["command"] = shlex.join(entry.arguments)
    if entry.output is not None and not drop_output_field:
        data["output"] = entry.output
    return data


def write_compilation_database(path: str, entries: Iterable[Entry], command_as_array: bool = True, drop_output_field: bool = False) -> int:
    """Write entries as a JSON compilation database.

    Args:
        path: Output file (usually compile_commands.json)
        entries: Entries to write
        command_as_array: Write "arguments" arrays instead of "command" strings
        drop_output_field: Leave the "output" field out

    Returns:
        Number of entries written

    Raises:
        ExportError: If the file cannot be written
    """
    data = [entry_to_dict(entry, command_as_array, drop_output_field) for entry in entries]
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
    except OSError as e:
        logger.error("Failed to write compilation database: %s", e)
        raise ExportError(f"Failed to write compilation database {path}: {e}") from e

    logger.info("Wrote %d entries to %s", len(data), path)
    return len(data)
