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
"""Configuration file loading for the compilation database generator.

The file is JSON with two optional sections:

    {
      "compilation": {
        "compilers_to_recognize": [{"executable": "/opt/x/bin/xcc", "flags_to_add": ["-DX"], "flags_to_remove": []}],
        "compilers_to_exclude": ["/usr/bin/cc"]
      },
      "output": {
        "content": {"include_links": false, "paths_to_include": [], "paths_to_exclude": [], "duplicate_filter_fields": "file_output"},
        "format": {"command_as_array": true, "drop_output_field": false}
      }
    }

Unknown keys are ignored. Values of the wrong type raise ConfigurationError.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Tuple, Type
from dataclasses import dataclass, field

from semantic.constants import DUPLICATE_FILTER_CHOICES, DUPLICATE_FILTER_FILE_OUTPUT, ConfigurationError
from semantic.tool_wrapper import ConfiguredCompilerTool

logger = logging.getLogger(__name__)

__all__ = ["ConfiguredCompiler", "Configuration", "configuration_from_dict", "load_configuration"]


@dataclass(frozen=True)
class ConfiguredCompiler:
    """A compiler executable the user wants recognized.

    Attributes:
        executable: Path of the compiler executable
        flags_to_add: Flags appended to every recognized call
        flags_to_remove: Flags dropped from every recognized call
    """

    executable: str
    flags_to_add: Tuple[str, ...] = ()
    flags_to_remove: Tuple[str, ...] = ()

    def to_tool(self) -> ConfiguredCompilerTool:
        return ConfiguredCompilerTool(self.executable, self.flags_to_add, self.flags_to_remove)


@dataclass
class Configuration:
    """Run-time settings of the compilation database generator.

    Attributes:
        compilers_to_recognize: Extra compilers, tried before every built-in tool
        compilers_to_exclude: Program paths never treated as compiler calls
        include_links: Also write entries for link steps
        paths_to_include: Keep only entries for files under these directories (empty = all)
        paths_to_exclude: Drop entries for files under these directories
        duplicate_filter_fields: Which entry fields identify duplicates
        command_as_array: Write "arguments" arrays instead of "command" strings
        drop_output_field: Leave the "output" field out of entries
    """

    compilers_to_recognize: List[ConfiguredCompiler] = field(default_factory=list)
    compilers_to_exclude: List[str] = field(default_factory=list)
    include_links: bool = False
    paths_to_include: List[str] = field(default_factory=list)
    paths_to_exclude: List[str] = field(default_factory=list)
    duplicate_filter_fields: str = DUPLICATE_FILTER_FILE_OUTPUT
    command_as_array: bool = True
    drop_output_field: bool = False

    def compiler_tools(self) -> List[ConfiguredCompilerTool]:
        return [compiler.to_tool() for compiler in self.compilers_to_recognize]


def _name(where: str, key: str) -> str:
    return f"{where}.{key}" if where else key


def _get(section: Mapping[str, Any], key: str, expected: Type[Any], default: Any, where: str) -> Any:
    value = section.get(key, default)
    if not isinstance(value, expected):
        raise ConfigurationError(f"'{_name(where, key)}' must be of type {expected.__name__}, got {type(value).__name__}")
    return value


def _get_section(data: Mapping[str, Any], key: str, where: str) -> Dict[str, Any]:
    return _get(data, key, dict, {}, where)


def _get_strings(section: Mapping[str, Any], key: str, where: str) -> List[str]:
    values = _get(section, key, list, [], where)
    if not all(isinstance(value, str) for value in values):
        raise ConfigurationError(f"'{_name(where, key)}' must be a list of strings")
    return list(values)


def configuration_from_dict(data: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from parsed JSON.

    Args:
        data: Top level JSON object

    Returns:
        Configuration with defaults for missing keys

    Raises:
        ConfigurationError: If a value has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    compilation = _get_section(data, "compilation", "")
    output = _get_section(data, "output", "")
    content = _get_section(output, "content", "output")
    output_format = _get_section(output, "format", "output")

    compilers = []
    for index, entry in enumerate(_get(compilation, "compilers_to_recognize", list, [], "compilation")):
        where = f"compilation.compilers_to_recognize[{index}]"
        if not isinstance(entry, dict):
            raise ConfigurationError(f"'{where}' must be an object")
        executable = entry.get("executable")
        if not isinstance(executable, str) or not executable:
            raise ConfigurationError(f"'{where}.executable' must be a non-empty string")
        compilers.append(
            ConfiguredCompiler(
                executable=executable,
                flags_to_add=tuple(_get_strings(entry, "flags_to_add", where)),
                flags_to_remove=tuple(_get_strings(entry, "flags_to_remove", where)),
            )
        )

    duplicate_filter_fields = _get(content, "duplicate_filter_fields", str, DUPLICATE_FILTER_FILE_OUTPUT, "output.content")
    if duplicate_filter_fields not in DUPLICATE_FILTER_CHOICES:
        raise ConfigurationError(f"'output.content.duplicate_filter_fields' must be one of {', '.join(DUPLICATE_FILTER_CHOICES)}")

    return Configuration(
        compilers_to_recognize=compilers,
        compilers_to_exclude=_get_strings(compilation, "compilers_to_exclude", "compilation"),
        include_links=_get(content, "include_links", bool, False, "output.content"),
        paths_to_include=_get_strings(content, "paths_to_include", "output.content"),
        paths_to_exclude=_get_strings(content, "paths_to_exclude", "output.content"),
        duplicate_filter_fields=duplicate_filter_fields,
        command_as_array=_get(output_format, "command_as_array", bool, True, "output.format"),
        drop_output_field=_get(output_format, "drop_output_field", bool, False, "output.format"),
    )


def load_configuration(path: str) -> Configuration:
    """Load a configuration file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Parsed Configuration

    Raises:
        ConfigurationError: If the file cannot be read, is not JSON, or has the wrong shape
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {e}") from e

    configuration = configuration_from_dict(data)
    logger.debug("Loaded configuration from %s: %s", path, configuration)
    return configuration
