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
"""Captured process executions and the intercepted events file reader.

An Execution is the immutable snapshot of one process invocation. Executions are
produced by the interception layer, which writes one JSON object per line into an
events file. Only process-start events carry an execution; everything else in the
file is skipped.

Example event line:
    {"pid": 42, "ppid": 1, "started": {"execution": {"executable": "/usr/bin/gcc",
     "arguments": ["gcc", "-c", "foo.c"], "working_dir": "/src", "environment": {}}}}
"""

import os
import json
import logging
import dataclasses
from typing import Any, Dict, Iterator, List, Mapping, Tuple
from dataclasses import dataclass, field

from semantic.constants import EventFileError

logger = logging.getLogger(__name__)

__all__ = ["Execution", "load_executions", "iter_executions"]


@dataclass(frozen=True)
class Execution:
    """One captured process invocation.

    Attributes:
        program: Path of the executed program
        arguments: Argument vector, argv[0] included
        working_directory: Working directory of the process
        environment: Environment variables of the process
    """

    program: str
    arguments: Tuple[str, ...]
    working_directory: str
    environment: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Accept any sequence, store a tuple
        if not isinstance(self.arguments, tuple):
            object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def flags(self) -> Tuple[str, ...]:
        """Arguments without argv[0]."""
        return self.arguments[1:]

    @property
    def program_name(self) -> str:
        """Basename of the program path."""
        return os.path.basename(self.program)

    def with_command(self, command: List[str]) -> "Execution":
        """Return a copy running a different command in the same directory and environment.

        Args:
            command: New argument vector; command[0] becomes the program

        Returns:
            New Execution
        """
        return dataclasses.replace(self, program=command[0], arguments=tuple(command))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Execution":
        """Build an Execution from its event representation.

        Args:
            data: Mapping with executable, arguments, working_dir and optional environment

        Returns:
            New Execution

        Raises:
            ValueError: If a required key is missing or has the wrong type
        """
        for key in ("executable", "arguments", "working_dir"):
            if key not in data:
                raise ValueError(f"execution is missing '{key}'")

        arguments = data["arguments"]
        if not isinstance(arguments, list) or not all(isinstance(arg, str) for arg in arguments):
            raise ValueError("execution 'arguments' must be a list of strings")

        environment = data.get("environment") or {}
        if not isinstance(environment, dict):
            raise ValueError("execution 'environment' must be an object")

        return cls(
            program=str(data["executable"]),
            arguments=tuple(arguments),
            working_directory=str(data["working_dir"]),
            environment=dict(environment),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the event representation of this execution."""
        return {
            "executable": self.program,
            "arguments": list(self.arguments),
            "working_dir": self.working_directory,
            "environment": dict(self.environment),
        }


def iter_executions(lines: Iterator[str], source: str = "<events>") -> Iterator[Execution]:
    """Parse executions out of event lines.

    Args:
        lines: Iterable of JSON lines
        source: Name used in error messages

    Yields:
        Execution for every process-start event

    Raises:
        EventFileError: If a line is not valid JSON or a start event is incomplete
    """
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        try:
            event = json.loads(line)
        except json.JSONDecodeError as e:
            raise EventFileError(f"{source}:{line_number}: invalid JSON: {e}") from e

        if not isinstance(event, dict):
            raise EventFileError(f"{source}:{line_number}: event must be a JSON object")

        started = event.get("started")
        if started is None:
            logger.debug("%s:%d: skipping non-start event", source, line_number)
            continue

        if not isinstance(started, dict) or not isinstance(started.get("execution"), dict):
            raise EventFileError(f"{source}:{line_number}: start event has no execution")

        try:
            yield Execution.from_dict(started["execution"])
        except ValueError as e:
            raise EventFileError(f"{source}:{line_number}: {e}") from e


def load_executions(path: str) -> List[Execution]:
    """Load all executions from an intercepted events file.

    Args:
        path: Path to the JSON-lines events file

    Returns:
        Executions in file order

    Raises:
        EventFileError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            executions = list(iter_executions(f, source=path))
    except OSError as e:
        raise EventFileError(f"Cannot read events file {path}: {e}") from e

    logger.debug("Loaded %d executions from %s", len(executions), path)
    return executions
