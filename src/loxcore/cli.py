"""Command-line interface for loxcore."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from loxcore.errors import EvalError, LexError, LoxError, ParseError

# sysexits.h codes
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70
EX_CONFIG = 78

CONFIG_NAME = "loxcore.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    script: Path | None
    keep_comments: bool
    show_tokens: bool
    show_ast: bool
    render: bool
    prompt: str


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="loxcore",
        description="Scan, parse and evaluate Lox expressions",
    )
    p.add_argument("script", nargs="?", help="Script file (default: interactive prompt)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--tokens", action="store_true", help="Dump tokens to stderr")
    p.add_argument("--ast", action="store_true", help="Dump expression trees to stderr")
    p.add_argument(
        "--render",
        action="store_true",
        help="Print each expression's source form instead of its value",
    )
    p.add_argument(
        "--no-comments",
        action="store_true",
        help="Drop line comments from the token stream",
    )
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    value = config.get(name)
    return value if isinstance(value, dict) else {}


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    script = Path(args.script) if args.script else None
    base_dir = script.parent if script is not None else Path(".")
    if not base_dir.parts:
        base_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, base_dir)

    keep_comments = True
    cfg_keep = _section(config, "lexer").get("keep_comments")
    if isinstance(cfg_keep, bool):
        keep_comments = cfg_keep
    if args.no_comments:
        keep_comments = False

    output = _section(config, "output")
    show_tokens = args.tokens or output.get("tokens") is True
    show_ast = args.ast or output.get("ast") is True
    render = args.render or output.get("render") is True

    prompt = "> "
    cfg_prompt = _section(config, "prompt").get("text")
    if isinstance(cfg_prompt, str):
        prompt = cfg_prompt

    return CliOptions(
        script=script,
        keep_comments=keep_comments,
        show_tokens=show_tokens,
        show_ast=show_ast,
        render=render,
        prompt=prompt,
    )


def execute(source: str, options: CliOptions, out: TextIO) -> None:
    """Scan, parse and evaluate *source*, writing one result line per expression.

    The whole source is parsed before anything is evaluated, so a syntax error
    produces no partial output.
    """
    from loxcore.debug import dump_ast, dump_tokens
    from loxcore.eval import evaluate, stringify
    from loxcore.lexer import tokenize
    from loxcore.parser import Parser
    from loxcore.render import render

    tokens = tokenize(source, keep_comments=options.keep_comments)
    if options.show_tokens:
        dump_tokens(tokens, file=sys.stderr)

    exprs = Parser(tokens, source).parse()
    for expr in exprs:
        if options.show_ast:
            dump_ast(expr, file=sys.stderr)
        if options.render:
            out.write(render(expr) + "\n")
        else:
            out.write(stringify(evaluate(expr, source)) + "\n")


def run_file(options: CliOptions) -> int:
    """Run a whole script. Any error aborts the file."""
    assert options.script is not None
    try:
        source = options.script.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: cannot read {options.script}: {exc.strerror}", file=sys.stderr)
        return EX_NOINPUT

    filename = str(options.script)
    try:
        execute(source, options, sys.stdout)
    except (LexError, ParseError) as exc:
        print(exc.format(filename), file=sys.stderr)
        return EX_DATAERR
    except EvalError as exc:
        print(exc.format(filename), file=sys.stderr)
        return EX_SOFTWARE
    return EX_OK


def run_prompt(options: CliOptions, stdin: TextIO | None = None) -> int:
    """Read-evaluate loop. Errors are reported and the next line is read.

    A blank line, ``exit`` or end of input ends the session.
    """
    if stdin is None:
        stdin = sys.stdin
    try:
        while True:
            sys.stdout.write(options.prompt)
            sys.stdout.flush()
            line = stdin.readline()
            if not line or line.strip() in ("", "exit"):
                break
            try:
                execute(line, options, sys.stdout)
            except LoxError as exc:
                print(exc.format("<stdin>"), file=sys.stderr)
    except KeyboardInterrupt:
        sys.stdout.write("\n")
    return EX_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns a sysexits exit code. Does not call sys.exit()."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse exits non-zero on bad usage and 0 after --help
        return EX_USAGE if exc.code else EX_OK

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return EX_CONFIG

    if options.script is None:
        return run_prompt(options)
    return run_file(options)
