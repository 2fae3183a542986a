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
"""Shared constants for the build-semantic tools.

This module provides centralized constants and the exception hierarchy used across
the recognition core and the command-line tool.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Build System Constants
# =============================================================================

COMPILE_COMMANDS_JSON = "compile_commands.json"  # Standard compilation database filename
DEFAULT_EVENTS_FILE = "events.json"  # Default intercepted events file (JSON lines)

# Environment variables the GCC-family drivers read include directories from
ENV_CPATH = "CPATH"  # Searched like -I
ENV_SYSTEM_INCLUDE_PATHS = ("C_INCLUDE_PATH", "CPLUS_INCLUDE_PATH", "OBJC_INCLUDE_PATH")  # Searched like -isystem

# =============================================================================
# Compilation Database Output
# =============================================================================

DUPLICATE_FILTER_FILE = "file"
DUPLICATE_FILTER_FILE_OUTPUT = "file_output"
DUPLICATE_FILTER_ALL = "all"
DUPLICATE_FILTER_CHOICES = (DUPLICATE_FILTER_FILE, DUPLICATE_FILTER_FILE_OUTPUT, DUPLICATE_FILTER_ALL)

# =============================================================================
# Exception Classes
# =============================================================================


class BuildSemanticError(Exception):
    """Base exception for all build-semantic errors.

    All exceptions carry an exit_code attribute that indicates what exit code
    the program should use when this error is caught at the main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(BuildSemanticError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ArgumentError(ValidationError):
    """Raised when command-line arguments are invalid."""


class ConfigurationError(ValidationError):
    """Raised when the configuration file is unreadable or has the wrong shape."""


class EventFileError(ValidationError):
    """Raised when the intercepted events file cannot be read or parsed."""


# Recognition errors
class RecognitionError(BuildSemanticError):
    """Raised by the recognition core when one execution cannot be recognized.

    The kind attribute names the failure for the Recognition result value. It is
    the string value of semantic_types.ErrorKind.
    """

    kind = "recognition-error"


class NotApplicableError(RecognitionError):
    """Raised when a tool is asked to recognize a program outside its family."""

    kind = "not-applicable"


class TruncatedFlagError(RecognitionError):
    """Raised when a flag declares more operands than there are arguments left."""

    kind = "truncated-flag"


class MalformedInvocationError(RecognitionError):
    """Raised when parsed flags cannot be classified consistently."""

    kind = "malformed-invocation"


# Output errors (EXIT_RUNTIME_ERROR)
class ExportError(BuildSemanticError):
    """Raised when the compilation database cannot be written."""
