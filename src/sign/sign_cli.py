"""
SIGN CLI Entrypoint.

This module provides the command-line interface for the SIGN front end. It loads
source text, runs the lexer and parser, and prints the result.

Features:
    - Read source from `.sn` files or inline strings.
    - Dump the token stream, or the AST as an indented tree, JSON, or re-printed source.
    - Output to console or file.
    - Report the first lex/parse error on stderr with a non-zero exit status.

Example usage:
    sign hello.sn
    sign -s "x ? x + 1" -f json
    sign myfile.sn --tokens -o myfile.tokens
    sign myfile.sn -f source -v

Functions:
    run_sign(source: str, is_string: bool = False, fmt: str = "tree", out: Optional[str] = None,
             tokens: bool = False) -> str:
        Executes the SIGN pipeline (load → lex → parse → format → output).

    main(argv: Optional[list[str]] = None) -> None:
        Parses CLI arguments, configures logging and invokes `run_sign`.
"""

import argparse
import json
import logging
import sys

from sign.sign_ast import format_tree
from sign.sign_errors import CompileError, InputOutputError, UnexpectedError
from sign.sign_lexer import CharacterStream, Lexer
from sign.sign_parser import Parser
from sign.sign_printer import to_source

logger = logging.getLogger(__name__)

FORMATS = ("tree", "json", "source")


def load_source(path: str) -> str:
    """Read a `.sn` file.

    Raises:
        ValueError: If the path does not end with '.sn'.
        InputOutputError: If the file cannot be read.
    """
    if not path.endswith(".sn"):
        raise ValueError("Only .sn files are supported.")
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise InputOutputError(f"{path}: {e.strerror or e}") from e


def format_tokens(source: str) -> str:
    lines = []
    for tok in Lexer(CharacterStream(source)):
        lines.append(f"{tok.line}:{tok.col}\t{tok!r}")
    return "\n".join(lines)


def run_sign(
    source: str,
    is_string: bool = False,
    fmt: str = "tree",
    out: str | None = None,
    tokens: bool = False,
) -> str:
    """
    Run the SIGN front end: load, lex, parse, and write the formatted result.

    Args:
        source (str): SIGN source code or path to a `.sn` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        fmt (str): AST output format, one of 'tree', 'json' or 'source'. Defaults to 'tree'.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        tokens (bool): If True, outputs the token stream instead of the AST.

    Returns:
        str: The text that was printed or written.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.sn',
            or if `fmt` is unknown.
        CompileError: On the first lexical or syntax error.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format: {fmt}")

    # 1. Read source
    if not is_string:
        logger.debug("reading %s", source)
        source = load_source(source)

    # 2. Lexing (and parsing unless only tokens are wanted)
    if tokens:
        text = format_tokens(source)
    else:
        ast = Parser(Lexer(CharacterStream(source))).parse()
        try:
            if fmt == "json":
                text = json.dumps(ast.to_dict(), indent=2, ensure_ascii=False)
            elif fmt == "source":
                text = to_source(ast)
            else:
                text = format_tree(ast)
        except RecursionError as e:
            raise UnexpectedError(f"syntax tree too deep for {fmt} output") from e

    # 3. Output result
    if out:
        try:
            with open(out, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        except OSError as e:
            raise InputOutputError(f"{out}: {e.strerror or e}") from e
        logger.debug("wrote %s", out)
    else:
        print(text)
    return text


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the SIGN CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream instead of the AST.
        - `-f`, `--format`: AST output format ('tree', 'json' or 'source'), default is 'tree'.
        - `-o`, `--out`: Write output to a file.
        - `-v`, `--verbose`: Enable debug logging.

    Exits with status 1 after printing `error: <message>` when the input is rejected.
    """
    parser = argparse.ArgumentParser(prog="sign")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the AST"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=FORMATS,
        default="tree",
        help="AST output format (default: tree)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_sign(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            tokens=args.tokens,
        )
    except (CompileError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
