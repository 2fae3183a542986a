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
"""Pytest configuration and shared fixtures for build-semantic tests.

Fixture Scopes:
- function: Default, recreated for each test
- module: Shared across tests in one file, use for immutable data (tool chains)
"""

import os
import sys
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from semantic.execution import Execution
from semantic.tool_chain import ToolChain, create_default_tool_chain


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="buildsemantic_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def make_execution() -> Callable[..., Execution]:
    """Factory for executions running in /src with an empty environment.

    The program path becomes argv[0] unless argv0 is given.
    """

    def factory(program: str, *args: str, cwd: str = "/src", env: Optional[Dict[str, str]] = None, argv0: Optional[str] = None) -> Execution:
        return Execution(program=program, arguments=(argv0 or program,) + args, working_directory=cwd, environment=env or {})

    return factory


@pytest.fixture(scope="module")
def default_chain() -> ToolChain:
    """Default tool chain without configuration.

    Scope: module (the chain is immutable)
    """
    return create_default_tool_chain()


def make_event_line(program: str, arguments: List[str], cwd: str = "/src", environment: Optional[Dict[str, str]] = None, pid: int = 1) -> str:
    """Return one process-start event as a JSON line."""
    execution: Dict[str, Any] = {"executable": program, "arguments": arguments, "working_dir": cwd, "environment": environment or {}}
    return json.dumps({"rid": "1", "pid": pid, "ppid": 0, "started": {"execution": execution}})


@pytest.fixture
def events_file(temp_dir: str) -> Callable[[List[str]], str]:
    """Factory writing event lines into a file inside temp_dir.

    Dependencies: temp_dir
    """

    def factory(lines: List[str], name: str = "events.json") -> str:
        path = os.path.join(temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return path

    return factory


@pytest.fixture
def event_line() -> Callable[..., str]:
    """Event line builder, see make_event_line."""
    return make_event_line
