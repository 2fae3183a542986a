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
"""Declarative flag grammar tables.

A FlagGrammarTable maps flag spellings to FlagRule records. Every recognizer owns
exactly one table; tables are built once at import time and never mutated, so they
can be shared by any number of concurrent recognitions.

Lookup precedence:
    1. An EXACT rule whose spelling equals the token
    2. The PREFIX or GLUED rule with the longest matching spelling
    3. Among equally long spellings, the rule declared first

Example:
    >>> table = FlagGrammarTable("demo", [glued_or_separate("-I", Category.KEPT)])
    >>> table.lookup("-Iinclude").match_mode
    <MatchMode.GLUED: 'glued'>
    >>> table.lookup("-I").arity
    1
"""

import enum
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

logger = logging.getLogger(__name__)

__all__ = [
    "MatchMode",
    "Category",
    "FlagRule",
    "FlagGrammarTable",
    "REST_OF_ARGUMENT",
    "exact",
    "prefix",
    "glued",
    "glued_or_separate",
]

# Arity of GLUED rules: the operand is the rest of the same token
REST_OF_ARGUMENT = -1


class MatchMode(enum.Enum):
    """How a rule spelling is compared against a token."""

    EXACT = "exact"  # token == spelling, operands follow as separate tokens
    PREFIX = "prefix"  # token starts with spelling, whole token is the flag
    GLUED = "glued"  # token starts with spelling, remainder is the operand


class Category(enum.Enum):
    """Classification tag of a flag.

    Output selection:
        Compile/Preprocess keep KEPT, BOTH, COMPILE_ONLY and UNKNOWN_FLAG.
        Link keeps KEPT, BOTH, LINK_ONLY and UNKNOWN_FLAG.
        Everything else is never copied into the output flags.
    """

    KEPT = "kept"
    BOTH = "both"
    COMPILE_ONLY = "compile-only"
    LINK_ONLY = "link-only"
    CONSUMED_NO_OP = "consumed-no-op"
    INPUT_FILE_MARKER = "input-file-marker"
    OUTPUT_FILE_MARKER = "output-file-marker"
    COMPILE_MARKER = "compile-marker"
    PREPROCESS_MARKER = "preprocess-marker"
    QUERY_MARKER = "query-marker"
    UNKNOWN_FLAG = "unknown-flag"


COMPILE_OUTPUT_CATEGORIES = frozenset({Category.KEPT, Category.BOTH, Category.COMPILE_ONLY, Category.UNKNOWN_FLAG})
LINK_OUTPUT_CATEGORIES = frozenset({Category.KEPT, Category.BOTH, Category.LINK_ONLY, Category.UNKNOWN_FLAG})


@dataclass(frozen=True)
class FlagRule:
    """One entry of a flag grammar table.

    Attributes:
        spelling: Exact flag spelling, or the prefix for PREFIX/GLUED rules
        match_mode: How the spelling is matched
        arity: Number of following tokens consumed, REST_OF_ARGUMENT for GLUED rules
        category: Classification tag
    """

    spelling: str
    match_mode: MatchMode
    arity: int
    category: Category

    def __post_init__(self) -> None:
        if not self.spelling:
            raise ValueError("Flag rule spelling must not be empty")
        if self.match_mode is MatchMode.GLUED:
            if self.arity != REST_OF_ARGUMENT:
                raise ValueError(f"Glued rule '{self.spelling}' must take the rest of the argument")
        elif self.arity < 0:
            raise ValueError(f"Rule '{self.spelling}' has negative arity {self.arity}")

    def matches(self, token: str) -> bool:
        """Check if this rule applies to the token."""
        if self.match_mode is MatchMode.EXACT:
            return token == self.spelling
        if self.match_mode is MatchMode.GLUED:
            return len(token) > len(self.spelling) and token.startswith(self.spelling)
        return token.startswith(self.spelling)


RuleSpec = Union[FlagRule, Iterable[FlagRule]]


def exact(spelling: str, category: Category, arity: int = 0) -> Tuple[FlagRule, ...]:
    """Declare a flag that must match the whole token."""
    return (FlagRule(spelling, MatchMode.EXACT, arity, category),)


def prefix(spelling: str, category: Category, arity: int = 0) -> Tuple[FlagRule, ...]:
    """Declare a flag family recognized by its leading characters (e.g. -W, -f)."""
    return (FlagRule(spelling, MatchMode.PREFIX, arity, category),)


def glued(spelling: str, category: Category) -> Tuple[FlagRule, ...]:
    """Declare a flag whose operand is glued to it (e.g. -std=c99, -O2)."""
    return (FlagRule(spelling, MatchMode.GLUED, REST_OF_ARGUMENT, category),)


def glued_or_separate(spelling: str, category: Category, eq: bool = False) -> Tuple[FlagRule, ...]:
    """Declare a flag taking one operand either glued or as the next token.

    Args:
        spelling: Flag spelling (e.g. "-I", "--sysroot")
        category: Classification tag for both forms
        eq: If True the glued form is written with '=' (e.g. --sysroot=dir)

    Returns:
        The EXACT (arity 1) and GLUED rules
    """
    glued_spelling = f"{spelling}=" if eq else spelling
    return (
        FlagRule(spelling, MatchMode.EXACT, 1, category),
        FlagRule(glued_spelling, MatchMode.GLUED, REST_OF_ARGUMENT, category),
    )


def _flatten(rules: Iterable[RuleSpec]) -> List[FlagRule]:
    flat: List[FlagRule] = []
    for item in rules:
        if isinstance(item, FlagRule):
            flat.append(item)
        else:
            flat.extend(item)
    return flat


class FlagGrammarTable:
    """Immutable lookup structure from tokens to flag rules.

    Args:
        name: Toolchain family name, used in log and error messages
        rules: Rules in declaration order (single rules or groups from the helpers)
        option_prefixes: Leading characters that mark an option-looking token

    Raises:
        ValueError: If two rules share the same spelling and match mode
    """

    def __init__(self, name: str, rules: Iterable[RuleSpec], option_prefixes: Sequence[str] = ("-",)):
        self._name = name
        self._rules: Tuple[FlagRule, ...] = tuple(_flatten(rules))
        self._option_prefixes: Tuple[str, ...] = tuple(option_prefixes)

        exact_rules: Dict[str, FlagRule] = {}
        prefixed: List[Tuple[int, int, FlagRule]] = []
        seen = set()
        for index, rule in enumerate(self._rules):
            key = (rule.spelling, rule.match_mode)
            if key in seen:
                raise ValueError(f"Duplicate {rule.match_mode.value} rule '{rule.spelling}' in {name} flag table")
            seen.add(key)

            if rule.match_mode is MatchMode.EXACT:
                exact_rules[rule.spelling] = rule
            else:
                prefixed.append((-len(rule.spelling), index, rule))

        self._exact = exact_rules
        self._prefixed: Tuple[FlagRule, ...] = tuple(rule for _, _, rule in sorted(prefixed, key=lambda item: (item[0], item[1])))

    @property
    def name(self) -> str:
        return self._name

    @property
    def rules(self) -> Tuple[FlagRule, ...]:
        """Rules in declaration order."""
        return self._rules

    @property
    def option_prefixes(self) -> Tuple[str, ...]:
        return self._option_prefixes

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[FlagRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"FlagGrammarTable({self._name!r}, {len(self._rules)} rules)"

    def lookup(self, token: str) -> Optional[FlagRule]:
        """Find the most specific rule for a token.

        Args:
            token: One command-line argument

        Returns:
            Matching rule, or None if no rule applies
        """
        rule = self._exact.get(token)
        if rule is not None:
            return rule

        for rule in self._prefixed:
            if rule.matches(token):
                return rule
        return None

    def looks_like_option(self, token: str) -> bool:
        """Check if a token is spelled like an option of this family.

        A lone "-" names standard input and is never an option.
        """
        if len(token) < 2:
            return False
        return token.startswith(self._option_prefixes)

    def derive(self, name: str, rules: Iterable[RuleSpec], option_prefixes: Optional[Sequence[str]] = None) -> "FlagGrammarTable":
        """Build a new table from this one plus additional rules.

        Rules in `rules` replace base rules with the same spelling and match mode.
        This table is left untouched.

        Args:
            name: Name of the new table
            rules: Additional or overriding rules
            option_prefixes: Option prefixes of the new table (default: this table's)

        Returns:
            New FlagGrammarTable
        """
        extra = _flatten(rules)
        overridden = {(rule.spelling, rule.match_mode) for rule in extra}
        base = [rule for rule in self._rules if (rule.spelling, rule.match_mode) not in overridden]
        prefixes = self._option_prefixes if option_prefixes is None else option_prefixes
        return FlagGrammarTable(name, base + extra, prefixes)
