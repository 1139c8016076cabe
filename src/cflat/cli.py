"""
cflat Command-Line Interface.

Provides debug commands for inspecting how cflat programs are read.

Usage:
    cflat tokens input.cf           # Token dump
    cflat ast input.cf              # Syntax tree dump
    cflat check input.cf            # Syntax check
    cflat check input.cf --json     # Syntax check, machine-readable
    cflat info                      # Show language info
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from cflat import __version__
from cflat.compiler import ParseResult, format_ast, format_tokens, load_source, parse_source
from cflat.compiler.lexer import Lexer
from cflat.compiler.tokens import KEYWORDS, OPERATORS, PUNCTUATORS
from cflat.utils.errors import LexerError, SourceLoadError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"
    RESET = "\033[0m"

    enabled = True

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""
        cls.enabled = False


def _init_colors(no_color: bool = False) -> None:
    """Initialize colors based on terminal capabilities and flags."""
    if no_color or not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cflat",
        description="cflat - front end for a small C-like scripting language",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="warning",
        help="Logging verbosity (default: warning)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (also honours NO_COLOR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tokens command (debug)
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show tokens for a cflat file (debug)",
    )
    tokens_parser.add_argument(
        "input",
        type=Path,
        help="Input cflat file",
    )

    # AST command (debug)
    ast_parser = subparsers.add_parser(
        "ast",
        help="Show the syntax tree for a cflat file (debug)",
    )
    ast_parser.add_argument(
        "input",
        type=Path,
        help="Input cflat file",
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a cflat file for syntax errors",
    )
    check_parser.add_argument(
        "input",
        type=Path,
        help="Input cflat file",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    subparsers.add_parser(
        "info",
        help="Show language information",
    )

    return parser


def _read_input(input_path: Path) -> Optional[str]:
    """Read the input file, reporting failure on stderr."""
    try:
        return load_source(input_path)
    except SourceLoadError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return None


def _print_failure(result: ParseResult, source: str) -> None:
    if result.diagnostics:
        print(result.render_diagnostics(source, use_color=Colors.enabled), file=sys.stderr)
    else:
        print(f"{Colors.RED}Error:{Colors.RESET} {result.error}", file=sys.stderr)


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command (debug)."""
    input_path: Path = args.input

    source = _read_input(input_path)
    if source is None:
        return 1

    try:
        tokens = Lexer(source, str(input_path)).tokenize()
    except LexerError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    if tokens:
        print(format_tokens(tokens))
    return 0


def cmd_ast(args: argparse.Namespace) -> int:
    """Handle the ast command (debug)."""
    input_path: Path = args.input

    source = _read_input(input_path)
    if source is None:
        return 1

    result = parse_source(source, str(input_path))
    if not result:
        _print_failure(result, source)
        return 1

    print(format_ast(result.program))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    input_path: Path = args.input

    try:
        source = load_source(input_path)
    except SourceLoadError as e:
        if args.json:
            print(json.dumps({"file": str(input_path), "success": False,
                              "error": str(e), "diagnostics": []}, indent=2))
        else:
            print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    result = parse_source(source, str(input_path))

    if args.json:
        print(json.dumps({
            "file": str(input_path),
            "success": result.success,
            "error": result.message or None,
            "diagnostics": [d.to_dict() for d in result.diagnostics],
        }, indent=2))
        return 0 if result else 1

    if not result:
        _print_failure(result, source)
        return 1

    count = len(result.program.declarations)
    print(f"{Colors.GREEN}OK:{Colors.RESET} {input_path} ({count} function(s), no syntax errors)")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the info command - show language information."""
    print(f"""
{Colors.BOLD}cflat Language{Colors.RESET}
==============

{Colors.CYAN}Version:{Colors.RESET} {__version__}

{Colors.CYAN}Keywords:{Colors.RESET}
  {" ".join(sorted(KEYWORDS))}

{Colors.CYAN}Operators:{Colors.RESET}
  {" ".join(sorted(OPERATORS))}

{Colors.CYAN}Punctuators:{Colors.RESET}
  {" ".join(sorted(PUNCTUATORS))}

{Colors.CYAN}Commands:{Colors.RESET}
  cflat tokens <file>        Show the token dump
  cflat ast <file>           Show the syntax tree
  cflat check <file>         Check for syntax errors
""")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    _init_colors(args.no_color)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "tokens": cmd_tokens,
        "ast": cmd_ast,
        "check": cmd_check,
        "info": cmd_info,
    }

    handler = command_handlers.get(args.command)
    if handler:
        logger.debug("Running command %s", args.command)
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
