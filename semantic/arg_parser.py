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
"""Toolchain-agnostic argument parsing driven by a flag grammar table.

The parser is assembled from small matcher combinators. A matcher looks at the
token at a given index and either declines (returns None) or returns the matched
argument together with the index of the next unconsumed token.

    parse = repeat(one_of(flag_matcher(table), unknown_flag_matcher(table), positional_matcher()))

The scan is a single left-to-right pass without backtracking, and it never looks
further ahead than the arity of the rule that matched.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from semantic.constants import MalformedInvocationError, TruncatedFlagError
from semantic.flag_table import Category, FlagGrammarTable, FlagRule, MatchMode

logger = logging.getLogger(__name__)

__all__ = [
    "MatchedArgument",
    "Matcher",
    "flag_matcher",
    "unknown_flag_matcher",
    "positional_matcher",
    "one_of",
    "repeat",
    "create_parser",
    "parse_arguments",
]


@dataclass(frozen=True)
class MatchedArgument:
    """Result of matching one flag (with its operands) or one positional token.

    Attributes:
        tokens: The original tokens consumed, verbatim
        rule: The rule that matched, None for unknown flags and positional tokens
        category: Flag category, None for positional tokens
        operands: Operand strings of the flag (glued remainder or following tokens)
    """

    tokens: Tuple[str, ...]
    rule: Optional[FlagRule] = None
    category: Optional[Category] = None
    operands: Tuple[str, ...] = ()

    @classmethod
    def flag(cls, rule: FlagRule, tokens: Sequence[str], operands: Sequence[str] = ()) -> "MatchedArgument":
        return cls(tuple(tokens), rule, rule.category, tuple(operands))

    @classmethod
    def unknown(cls, token: str) -> "MatchedArgument":
        return cls((token,), None, Category.UNKNOWN_FLAG, ())

    @classmethod
    def positional(cls, token: str) -> "MatchedArgument":
        return cls((token,), None, None, ())

    @property
    def is_positional(self) -> bool:
        return self.category is None

    @property
    def flag_token(self) -> str:
        """The token that introduced this argument."""
        return self.tokens[0]

    @property
    def value(self) -> Optional[str]:
        """The positional token itself, or the last operand of a flag."""
        if self.is_positional:
            return self.tokens[0]
        return self.operands[-1] if self.operands else None


# (tokens, index) -> (matched argument, next index) or None
Matcher = Callable[[Sequence[str], int], Optional[Tuple[MatchedArgument, int]]]


def flag_matcher(table: FlagGrammarTable) -> Matcher:
    """Match a token against the rules of a flag grammar table.

    Raises:
        TruncatedFlagError: If the rule needs more operands than tokens remain
    """

    def match(tokens: Sequence[str], index: int) -> Optional[Tuple[MatchedArgument, int]]:
        token = tokens[index]
        rule = table.lookup(token)
        if rule is None:
            return None

        if rule.match_mode is MatchMode.GLUED:
            return MatchedArgument.flag(rule, (token,), (token[len(rule.spelling) :],)), index + 1

        end = index + 1 + rule.arity
        if end > len(tokens):
            remaining = len(tokens) - index - 1
            raise TruncatedFlagError(f"{table.name}: flag '{token}' expects {rule.arity} argument(s) but {remaining} left")
        return MatchedArgument.flag(rule, tokens[index:end], tokens[index + 1 : end]), end

    return match


def unknown_flag_matcher(table: FlagGrammarTable) -> Matcher:
    """Pass through option-looking tokens no rule knows about."""

    def match(tokens: Sequence[str], index: int) -> Optional[Tuple[MatchedArgument, int]]:
        token = tokens[index]
        if not table.looks_like_option(token):
            return None
        logger.debug("%s: keeping unrecognized flag %s", table.name, token)
        return MatchedArgument.unknown(token), index + 1

    return match


def positional_matcher() -> Matcher:
    """Take any token as a positional argument."""

    def match(tokens: Sequence[str], index: int) -> Optional[Tuple[MatchedArgument, int]]:
        return MatchedArgument.positional(tokens[index]), index + 1

    return match


def one_of(*matchers: Matcher) -> Matcher:
    """Try matchers in order, the first one that matches wins."""

    def match(tokens: Sequence[str], index: int) -> Optional[Tuple[MatchedArgument, int]]:
        for matcher in matchers:
            result = matcher(tokens, index)
            if result is not None:
                return result
        return None

    return match


def repeat(matcher: Matcher) -> Callable[[Sequence[str]], List[MatchedArgument]]:
    """Apply a matcher until every token is consumed.

    Raises:
        MalformedInvocationError: If the matcher declines a token or makes no progress
    """

    def parse(tokens: Sequence[str]) -> List[MatchedArgument]:
        matched: List[MatchedArgument] = []
        index = 0
        while index < len(tokens):
            result = matcher(tokens, index)
            if result is None:
                raise MalformedInvocationError(f"Unparseable argument '{tokens[index]}' at position {index}")
            argument, next_index = result
            if next_index <= index:
                raise MalformedInvocationError(f"Parser made no progress at '{tokens[index]}'")
            matched.append(argument)
            index = next_index
        return matched

    return parse


def create_parser(table: FlagGrammarTable) -> Callable[[Sequence[str]], List[MatchedArgument]]:
    """Build the standard parser for a flag grammar table."""
    return repeat(one_of(flag_matcher(table), unknown_flag_matcher(table), positional_matcher()))


def parse_arguments(arguments: Sequence[str], table: FlagGrammarTable) -> List[MatchedArgument]:
    """Partition an argument list into matched flags and positional tokens.

    Args:
        arguments: Arguments without argv[0]
        table: Flag grammar table of the toolchain family

    Returns:
        Matched arguments in command-line order; empty for an empty argument list

    Raises:
        TruncatedFlagError: If a flag is missing its operands
        MalformedInvocationError: If a token cannot be matched at all
    """
    return create_parser(table)(arguments)
