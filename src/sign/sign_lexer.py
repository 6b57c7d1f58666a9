"""
Lexical analyzer for the SIGN programming language.

This module converts raw source text into a stream of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    LexerState: The two lexical modes (normal tokenizing, inside a string literal).
    Lexer: Converts a CharacterStream into a sequence of tokens, one per call.

Features:
    - Indentation is tracked as a stack of widths starting at [0]. A line that is
      indented deeper than the stack top emits INDENT(width); a shallower line pops
      one level per call and emits one DEDENT, so unwinding several levels takes
      several consecutive calls. The stack is unwound before EOF.
    - Indentation is only measured at the start of a logical line: while a bracket
      is open, line starts produce NEWLINE tokens but never INDENT/DEDENT.
    - Blank lines leave the indentation stack untouched.
    - Recognizes:
        * Identifiers (letter or `_`, then alphanumerics or `_`)
        * Numbers (greedy digit scan with at most one decimal point)
        * Strings (backtick delimited, verbatim, single line)
        * Chars (backslash followed by exactly one character, verbatim)
        * Operators and brackets, with the two-character forms != <= <> >= ==

Raises:
    LexError subclasses from sign.sign_errors: UnexpectedChar, UnexpectedEOF,
    InvalidNumber, NewlineInString, UnterminatedString.

Example:
    >>> lexer = Lexer(CharacterStream("x ? x"))
    >>> lexer.next_token()
    Token(IDENT, 'x')
"""

import logging
from collections.abc import Iterator
from enum import Enum, auto

from sign.sign_errors import (
    InvalidNumber,
    NewlineInString,
    UnexpectedChar,
    UnexpectedEOF,
    UnterminatedString,
)
from sign.sign_tokens import (
    Token,
    bracket_pairs,
    closing_brackets,
    token_hashmap,
    two_char_hashmap,
)

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            UnexpectedEOF: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise UnexpectedEOF(self.line, self.column)
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class LexerState(Enum):
    NORMAL = auto()
    IN_STRING = auto()


class Lexer:
    """Lexical analyzer for the SIGN language.

    The Lexer pulls characters from a CharacterStream and hands out one Token per
    `next_token()` call until EOF. After EOF has been returned every further call
    returns EOF again.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        state (LexerState): NORMAL, or IN_STRING while a string literal is read.
        indent_stack (list[int]): Open indentation widths; always starts with 0.
        bracket_depth (int): Number of currently open brackets.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.state = LexerState.NORMAL
        self.indent_stack: list[int] = [0]
        self.bracket_depth = 0
        self.at_line_start = True
        self.pending_width: int | None = None

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace other than newlines."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isspace() and ch != "\n":
                self.advance()
            else:
                break

    def measure_indentation(self) -> int | None:
        """Consumes leading whitespace of a line and returns its width.

        Returns None for blank lines, which never change indentation.
        """
        width = 0
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isspace() and ch != "\n":
                self.advance()
                width += 1
            else:
                break
        if self.peek() in ("\n", ""):
            return None
        return width

    def indentation_token(self, width: int) -> Token | None:
        """Compares a line width with the indentation stack.

        Emits at most one INDENT or DEDENT. The pending width is kept after a
        DEDENT so the next call compares it against the new stack top.
        """
        top = self.indent_stack[-1]
        line, col = self.stream.line, self.stream.column

        if width > top:
            self.indent_stack.append(width)
            self.pending_width = None
            logger.debug("indent to %d at line %d", width, line)
            return Token("INDENT", width, line, col)
        if width < top:
            self.indent_stack.pop()
            logger.debug("dedent from %d at line %d", top, line)
            return Token("DEDENT", None, line, col)

        self.pending_width = None
        return None

    def read_string(self) -> Token:
        """Reads a backtick-delimited literal; the opening backtick is current."""
        line, col = self.stream.line, self.stream.column
        self.advance()
        self.state = LexerState.IN_STRING
        chars = ""
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == "`":
                self.state = LexerState.NORMAL
                return Token("STRING", chars, line, col)
            if ch == "\n":
                raise NewlineInString(line, col)
            chars += ch
        raise UnterminatedString(line, col)

    def read_char(self) -> Token:
        line, col = self.stream.line, self.stream.column
        self.advance()
        if self.stream.end_of_file():
            raise UnexpectedEOF(line, col)
        return Token("CHAR", self.advance(), line, col)

    def read_number(self) -> Token:
        line, col = self.stream.line, self.stream.column
        text = ""
        has_dot = False
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isdigit():
                text += self.advance()
            elif ch == "." and not has_dot:
                has_dot = True
                text += self.advance()
            else:
                break
        try:
            value = float(text)
        except ValueError:
            raise InvalidNumber(text, line, col) from None
        return Token("NUMBER", value, line, col)

    def read_identifier(self) -> Token:
        line, col = self.stream.line, self.stream.column
        ident = ""
        while not self.stream.end_of_file() and (
            self.peek().isalnum() or self.peek() == "_"
        ):
            ident += self.advance()
        return Token("IDENT", ident, line, col)

    def match_operator(self) -> Token:
        """Matches a two-character operator first, then a single character.

        Raises:
            UnexpectedChar: If the character starts no known token.
        """
        line, col = self.stream.line, self.stream.column
        pair = self.stream.peek() + self.stream.peek(1)
        if pair in two_char_hashmap:
            self.advance()
            self.advance()
            return Token(two_char_hashmap[pair], pair, line, col)

        ch = self.peek()
        if ch not in token_hashmap:
            raise UnexpectedChar(ch, line, col)
        self.advance()
        type_ = token_hashmap[ch]
        if type_ in bracket_pairs:
            self.bracket_depth += 1
        elif type_ in closing_brackets and self.bracket_depth > 0:
            self.bracket_depth -= 1
        return Token(type_, ch, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token is encountered.
        """
        if self.at_line_start:
            self.at_line_start = False
            if self.bracket_depth == 0:
                self.pending_width = self.measure_indentation()

        if self.pending_width is not None:
            tok = self.indentation_token(self.pending_width)
            if tok is not None:
                return tok

        self.skip_whitespace()
        line, col = self.stream.line, self.stream.column

        if self.stream.end_of_file():
            if len(self.indent_stack) > 1:
                top = self.indent_stack.pop()
                logger.debug("dedent from %d at end of input", top)
                return Token("DEDENT", None, line, col)
            return Token("EOF", "EOF", line, col)

        ch = self.peek()

        if ch == "\n":
            self.advance()
            self.at_line_start = True
            return Token("NEWLINE", "\n", line, col)

        if ch == "`":
            return self.read_string()

        if ch == "\\":
            return self.read_char()

        if ch.isdigit():
            return self.read_number()

        if ch.isalpha() or ch == "_":
            return self.read_identifier()

        return self.match_operator()


def tokenize(source: str) -> list[Token]:
    """Lexes a whole source string, returning every token including EOF."""
    return list(Lexer(CharacterStream(source)))


__all__ = ["CharacterStream", "Lexer", "LexerState", "Token", "tokenize"]
