"""
Error taxonomy for the SIGN front end.

Every failure raised by the lexer, the parser, the printer's parameter checks
or the CLI loader derives from `CompileError`. The hierarchy mirrors the stage
that detects the problem:

Classes:
    CompileError: Base class. Carries the taxonomy `kind`, a message and the
        source position (line/col, 0 when unknown).
    LexError: Character-level failures (bad characters, literals, numbers).
    ParseError: Grammar failures (missing tokens, brackets, indentation).
    SemanticError: Declared for the analysis stage; never raised by lex/parse.
    GeneralError: I/O and unexpected failures surfaced by the CLI.

The first error raised aborts the current `next_token()` or `parse()` call;
there is no recovery and no aggregation of several errors for one input.

Example:
    >>> raise UnexpectedChar("$", line=1, col=4)
    Traceback (most recent call last):
    ...
    sign.sign_errors.UnexpectedChar: Unexpected character: '$' at line 1, col 4
"""


class CompileError(Exception):
    """Base class for every SIGN front-end error.

    Attributes:
        kind (str): Taxonomy name of the error (e.g. "UnexpectedChar").
        message (str): Human readable description without position.
        line (int): 1-based line of the offending input, 0 if unknown.
        col (int): 1-based column of the offending input, 0 if unknown.
    """

    kind = "CompileError"

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.line:
            return f"{self.message} at line {self.line}, col {self.col}"
        return self.message


class LexError(CompileError):
    kind = "LexError"


class ParseError(CompileError):
    kind = "ParseError"


class SemanticError(CompileError):
    kind = "SemanticError"


class GeneralError(CompileError):
    kind = "GeneralError"


# Lexer errors


class UnexpectedChar(LexError):
    kind = "UnexpectedChar"

    def __init__(self, char: str, line: int = 0, col: int = 0) -> None:
        self.char = char
        super().__init__(f"Unexpected character: '{char}'", line, col)


class UnexpectedToken(LexError):
    kind = "UnexpectedToken"

    def __init__(self, token: str, line: int = 0, col: int = 0) -> None:
        self.token = token
        super().__init__(f"Unexpected token: {token}", line, col)


class UnexpectedEOF(LexError):
    kind = "UnexpectedEOF"

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Unexpected end of file", line, col)


class InvalidNumber(LexError):
    kind = "InvalidNumber"

    def __init__(self, text: str, line: int = 0, col: int = 0) -> None:
        self.text = text
        super().__init__(f"Invalid number format: {text}", line, col)


class NewlineInString(LexError):
    kind = "NewlineInString"

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Newline is not allowed in string literals", line, col)


class UnterminatedString(LexError):
    kind = "UnterminatedString"

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Unterminated string literal", line, col)


class InvalidEscapeSequence(LexError):
    kind = "InvalidEscapeSequence"

    def __init__(self, sequence: str, line: int = 0, col: int = 0) -> None:
        self.sequence = sequence
        super().__init__(f"Invalid escape sequence: {sequence}", line, col)


# Parser errors


class InvalidSyntax(ParseError):
    kind = "InvalidSyntax"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        self.detail = detail
        super().__init__(f"Invalid syntax: {detail}", line, col)


class MultipleRestParameters(ParseError):
    kind = "MultipleRestParameters"

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Multiple rest parameters are not allowed", line, col)


class UnexpectedIndentation(ParseError):
    kind = "UnexpectedIndentation"

    def __init__(self, line: int = 0, col: int = 0) -> None:
        super().__init__("Unexpected indentation level", line, col)


class InvalidIdentifier(ParseError):
    kind = "InvalidIdentifier"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        self.detail = detail
        super().__init__(f"Invalid identifier: {detail}", line, col)


class ExpectedToken(ParseError):
    """Raised when the parser requires a specific token and finds another.

    Attributes:
        expected (str): Description of the required token.
        found (str): Description of the token actually present.
    """

    kind = "ExpectedToken"

    def __init__(self, expected: str, found: str, line: int = 0, col: int = 0) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected}, found {found}", line, col)


class InvalidOperator(ParseError):
    kind = "InvalidOperator"

    def __init__(self, operator: str, context: str, line: int = 0, col: int = 0) -> None:
        self.operator = operator
        self.context = context
        super().__init__(f"Invalid use of operator '{operator}' in {context}", line, col)


class UnmatchedBracket(ParseError):
    """Raised when a block is closed by a bracket of a different shape.

    Attributes:
        opening (str): The bracket that opened the block.
        closing (str): The bracket that tried to close it.
    """

    kind = "UnmatchedBracket"

    def __init__(self, opening: str, closing: str, line: int = 0, col: int = 0) -> None:
        self.opening = opening
        self.closing = closing
        super().__init__(
            f"Unmatched brackets: '{opening}' closed by '{closing}'", line, col
        )


# Semantic errors (raised by analysis stages outside this package)


class InvalidSpreadUsage(SemanticError):
    kind = "InvalidSpreadUsage"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid use of spread operator: {detail}", line, col)


class InvalidExportUsage(SemanticError):
    kind = "InvalidExportUsage"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid use of export operator: {detail}", line, col)


class InvalidImportUsage(SemanticError):
    kind = "InvalidImportUsage"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid use of import operator: {detail}", line, col)


class InvalidGetUsage(SemanticError):
    kind = "InvalidGetUsage"

    def __init__(self, detail: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"Invalid use of get operator: {detail}", line, col)


# General errors


class InputOutputError(GeneralError):
    kind = "IOError"

    def __init__(self, detail: str) -> None:
        super().__init__(f"IO error: {detail}")


class UnexpectedError(GeneralError):
    kind = "UnexpectedError"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Unexpected error: {detail}")


__all__ = [
    "CompileError",
    "ExpectedToken",
    "GeneralError",
    "InputOutputError",
    "InvalidEscapeSequence",
    "InvalidExportUsage",
    "InvalidGetUsage",
    "InvalidIdentifier",
    "InvalidImportUsage",
    "InvalidNumber",
    "InvalidOperator",
    "InvalidSpreadUsage",
    "InvalidSyntax",
    "LexError",
    "MultipleRestParameters",
    "NewlineInString",
    "ParseError",
    "SemanticError",
    "UnexpectedChar",
    "UnexpectedEOF",
    "UnexpectedError",
    "UnexpectedIndentation",
    "UnexpectedToken",
    "UnmatchedBracket",
    "UnterminatedString",
]
