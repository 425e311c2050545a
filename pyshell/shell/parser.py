"""
Command Parser Module

Parses shell input lines into structured command lines.

Author: YSNRFD
Version: 1.0.0
"""

import re
from dataclasses import dataclass, field
from typing import Optional, List
from enum import Enum

from pyshell.core.variables import Variables
from pyshell.exceptions import ParseError


class TokenType(Enum):
    """Token types for command parsing."""
    WORD = "word"
    SEMICOLON = "semicolon"


@dataclass(frozen=True)
class Token:
    """A parsed token. Substitution has already been applied to value."""
    type: TokenType
    value: str
    quoted: bool = False
    start: int = 0


@dataclass
class ParsedCommand:
    """One command invocation within a command line."""
    name: str
    args: List[str] = field(default_factory=list)
    source: str = ''

    @property
    def tokens(self) -> List[str]:
        return [self.name] + self.args


@dataclass
class CommandLine:
    """A parsed command line: zero or more sequenced commands."""
    line: str
    commands: List[ParsedCommand] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commands


VARIABLE_NAME = re.compile(r'[A-Za-z0-9_.\-]+')


class CommandLineParser:
    """
    Parses shell command lines.

    Handles:
    - Whitespace separated words
    - Single quotes (literal) and double quotes (substituting)
    - Backslash escapes
    - ${name} substitution from a variable scope
    - ';' sequencing of several commands on one line
    - '#' comments

    The parser keeps no state between calls.

    Example:
        >>> parser = CommandLineParser()
        >>> cl = parser.parse('echo "hello ${USER}"; pwd', variables)
        >>> [c.name for c in cl.commands]
        ['echo', 'pwd']
    """

    def parse(self, line: str, variables: Optional[Variables] = None) -> CommandLine:
        """
        Parse a command line.

        Args:
            line: Raw input line
            variables: Scope used for ${name} substitution

        Returns:
            CommandLine; empty for blank input and comments

        Raises:
            ParseError: On unterminated quotes or bad substitutions
        """
        if line is None:
            raise ParseError("No input")

        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            return CommandLine(line=line)

        tokens = self.tokenize(line, variables)
        return CommandLine(line=line, commands=self._parse_tokens(line, tokens))

    def tokenize(self, line: str, variables: Optional[Variables] = None) -> List[Token]:
        """Convert a line into tokens."""
        tokens: List[Token] = []
        current = ""
        started = False
        quoted = False
        token_start = 0
        in_quote: Optional[str] = None
        quote_start = 0
        i = 0

        def flush() -> None:
            nonlocal current, started, quoted
            if started:
                tokens.append(Token(TokenType.WORD, current, quoted, token_start))
            current = ""
            started = False
            quoted = False

        while i < len(line):
            char = line[i]

            if in_quote == "'":
                if char == "'":
                    in_quote = None
                else:
                    current += char
                i += 1
                continue

            if in_quote == '"':
                if char == '"':
                    in_quote = None
                    i += 1
                elif char == '\\' and i + 1 < len(line) and line[i + 1] in '"\\$':
                    current += line[i + 1]
                    i += 2
                elif char == '$' and line.startswith('${', i):
                    text, i = self._substitute(line, i, variables)
                    current += text
                else:
                    current += char
                    i += 1
                continue

            # Unquoted
            if char in ('"', "'"):
                if not started:
                    token_start = i
                in_quote = char
                quote_start = i
                started = True
                quoted = True
                i += 1
                continue

            if char == '\\':
                if not started:
                    token_start = i
                started = True
                if i + 1 < len(line):
                    current += line[i + 1]
                    i += 2
                else:
                    current += char
                    i += 1
                continue

            if char == ';':
                flush()
                tokens.append(Token(TokenType.SEMICOLON, ';', start=i))
                i += 1
                continue

            if char.isspace():
                flush()
                i += 1
                continue

            if char == '#' and not started:
                # Comment runs to end of line
                break

            if not started:
                token_start = i
            started = True

            if char == '$' and line.startswith('${', i):
                text, i = self._substitute(line, i, variables)
                current += text
                continue

            current += char
            i += 1

        if in_quote is not None:
            raise ParseError(
                f"Unterminated {in_quote} quote",
                line=line,
                position=quote_start
            )

        flush()
        return tokens

    def _substitute(
        self,
        line: str,
        start: int,
        variables: Optional[Variables]
    ) -> tuple[str, int]:
        """
        Expand the ${name} reference starting at start.

        Returns:
            (replacement text, index just past the closing brace)
        """
        end = line.find('}', start + 2)
        if end == -1:
            raise ParseError("Unterminated variable reference", line=line, position=start)

        name = line[start + 2:end]
        if not VARIABLE_NAME.fullmatch(name):
            raise ParseError(
                f"Invalid variable reference '${{{name}}}'",
                line=line,
                position=start
            )

        reference = line[start:end + 1]
        if variables is None or not variables.contains(name):
            return reference, end + 1

        value = variables.get(name)
        return ('' if value is None else str(value)), end + 1

    def _parse_tokens(self, line: str, tokens: List[Token]) -> List[ParsedCommand]:
        """Group tokens into sequenced commands."""
        commands: List[ParsedCommand] = []
        current_tokens: List[Token] = []
        segment_start = 0

        for token in tokens:
            if token.type == TokenType.SEMICOLON:
                self._apply_tokens(commands, current_tokens, line[segment_start:token.start])
                current_tokens = []
                segment_start = token.start + 1
            else:
                current_tokens.append(token)

        self._apply_tokens(commands, current_tokens, line[segment_start:])
        return commands

    def _apply_tokens(
        self,
        commands: List[ParsedCommand],
        tokens: List[Token],
        source: str
    ) -> None:
        """Append a command built from tokens, skipping empty segments."""
        if tokens:
            commands.append(ParsedCommand(
                name=tokens[0].value,
                args=[t.value for t in tokens[1:]],
                source=source.strip()
            ))
