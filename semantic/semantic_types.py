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
"""Type definitions for recognition results.

A recognized execution is described by exactly one Semantic variant:

    Compile     compilation of one or more sources (the -c stage, or a driver call
                that compiles and links in one go)
    Preprocess  preprocessing only (-E)
    Link        linking or archiving of objects and libraries
    QueryOnly   version/configuration queries with no build effect
    Unknown     the program belongs to a known family, but the call could not be
                classified confidently

Every recognition call returns a Recognition value that carries either the
Semantic or the kind of failure.
"""

import enum
from typing import ClassVar, Dict, Optional, Tuple, Type, Union, cast
from dataclasses import dataclass

from semantic.constants import MalformedInvocationError, NotApplicableError, RecognitionError, TruncatedFlagError

__all__ = ["Compile", "Preprocess", "Link", "QueryOnly", "Unknown", "Semantic", "ErrorKind", "Recognition"]


@dataclass(frozen=True)
class Compile:
    """Compilation of source files.

    Attributes:
        working_directory: Directory the compiler ran in
        compiler: Program path of the compiler
        source_files: Source files in command-line order (at least one)
        flags: Compile-relevant flags, verbatim and in order
        output_file: Value of the last output flag, if any
        language: Source language, if known
    """

    kind: ClassVar[str] = "compile"

    working_directory: str
    compiler: str
    source_files: Tuple[str, ...]
    flags: Tuple[str, ...] = ()
    output_file: Optional[str] = None
    language: Optional[str] = None

    @property
    def source_file(self) -> str:
        return self.source_files[0]


@dataclass(frozen=True)
class Preprocess:
    """Preprocessing of source files without producing objects.

    Attributes:
        working_directory: Directory the compiler ran in
        compiler: Program path of the compiler
        source_files: Source files in command-line order (at least one)
        flags: Compile-relevant flags, verbatim and in order
        output_file: Preprocessed output, if redirected with an output flag
        language: Source language, if known
    """

    kind: ClassVar[str] = "preprocess"

    working_directory: str
    compiler: str
    source_files: Tuple[str, ...]
    flags: Tuple[str, ...] = ()
    output_file: Optional[str] = None
    language: Optional[str] = None

    @property
    def source_file(self) -> str:
        return self.source_files[0]


@dataclass(frozen=True)
class Link:
    """Linking or archiving of objects and libraries.

    Attributes:
        working_directory: Directory the linker ran in
        linker: Program path of the linker driver or archiver
        inputs: Object and library paths in command-line order, without duplicates
        flags: Link-relevant flags, verbatim and in order
        output_file: Produced binary or archive, if named
    """

    kind: ClassVar[str] = "link"

    working_directory: str
    linker: str
    inputs: Tuple[str, ...]
    flags: Tuple[str, ...] = ()
    output_file: Optional[str] = None


@dataclass(frozen=True)
class QueryOnly:
    """Call without build effect (e.g. --version, -dumpmachine)."""

    kind: ClassVar[str] = "query"

    program: str


@dataclass(frozen=True)
class Unknown:
    """Call of a known toolchain that could not be classified."""

    kind: ClassVar[str] = "unknown"

    program: str
    reason: str = ""


Semantic = Union[Compile, Preprocess, Link, QueryOnly, Unknown]


class ErrorKind(enum.Enum):
    """Why a recognition failed."""

    NOT_APPLICABLE = NotApplicableError.kind
    TRUNCATED_FLAG = TruncatedFlagError.kind
    MALFORMED_INVOCATION = MalformedInvocationError.kind


_ERROR_TYPES: Dict[ErrorKind, Type[RecognitionError]] = {
    ErrorKind.NOT_APPLICABLE: NotApplicableError,
    ErrorKind.TRUNCATED_FLAG: TruncatedFlagError,
    ErrorKind.MALFORMED_INVOCATION: MalformedInvocationError,
}


@dataclass(frozen=True)
class Recognition:
    """Outcome of one recognition: a Semantic on success, an error kind on failure.

    Attributes:
        tool: Name of the tool that produced the outcome
        semantic: The recognized meaning, None on failure
        error_kind: Failure kind, None on success
        message: Human readable failure description
    """

    tool: str
    semantic: Optional[Semantic] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""

    def __post_init__(self) -> None:
        if (self.semantic is None) == (self.error_kind is None):
            raise ValueError(f"Recognition by {self.tool} needs exactly one of semantic and error_kind")

    @classmethod
    def success(cls, tool: str, semantic: Semantic) -> "Recognition":
        return cls(tool=tool, semantic=semantic)

    @classmethod
    def failure(cls, tool: str, error: RecognitionError) -> "Recognition":
        return cls(tool=tool, error_kind=ErrorKind(error.kind), message=str(error))

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def unwrap(self) -> Semantic:
        """Return the Semantic or raise the exception matching the failure kind.

        Raises:
            RecognitionError: The subclass matching error_kind
        """
        if self.error_kind is not None:
            raise _ERROR_TYPES[self.error_kind](self.message)
        # __post_init__ guarantees a semantic on success
        return cast(Semantic, self.semantic)
