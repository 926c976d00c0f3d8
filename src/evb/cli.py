from __future__ import annotations

import argparse
import json
from functools import partial
from pathlib import Path
from typing import Any, Never, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text
from rich_argparse import RawTextRichHelpFormatter

from eval_bridge import (
    AuthorizationGate,
    ConfigurationError,
    Denied,
    EvalSettings,
    ExecutionOutcome,
    ExecutionRequest,
    Failure,
    LocalEngine,
    edit_file,
    evaluate,
)
from eval_bridge.logging_config import setup_logging
from eval_bridge.tools import TOOLS

_CONSOLE = Console(no_color=False)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m evb")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for evaluating code and editing files.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m evb",
        description=(
            "eval-bridge CLI\n"
            "Evaluate Python code in a separate interpreter and report\n"
            "printed output, the last expression's value, or the error."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m evb run \"2 + 2\"\n"
            "  python -m evb run --yes \"print('Hello'); 42\"\n"
            "  python -m evb run --file script.py --json\n"
            "  python -m evb edit notes.txt draft final --replace-all\n"
            "  python -m evb tools"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--config",
        help=(
            "Path to a TOML settings file.\n"
            "Keys: python_executable, timeout_seconds, auto_execute, log_level."
        ),
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Evaluate Python code in a child interpreter.",
        description=(
            "Evaluate Python code in a child interpreter.\n"
            "You are asked to approve the code unless --yes or auto_execute is set."
        ),
        epilog=(
            "Examples:\n"
            "  python -m evb run \"[x * 2 for x in [1, 2, 3]]\"\n"
            "  python -m evb run --timeout 5 --cwd /tmp \"import os; os.getcwd()\""
        ),
        formatter_class=_HELP_FORMATTER,
    )
    run_cmd.add_argument("code", nargs="?", help="Code to evaluate (omit when using --file).")
    run_cmd.add_argument("--file", help="Read the code from this file instead.")
    run_cmd.add_argument(
        "--yes",
        action="store_true",
        help="Execute without asking for confirmation.",
    )
    run_cmd.add_argument("--timeout", type=int, help="Seconds before the child is killed.")
    run_cmd.add_argument("--python", help="Interpreter used to run the code.")
    run_cmd.add_argument("--cwd", help="Working directory for the child interpreter.")
    run_cmd.add_argument(
        "--json",
        action="store_true",
        help="Print the raw tool response as JSON.",
    )

    edit_cmd = sub.add_parser(
        "edit",
        help="Replace literal text in a file.",
        description=(
            "Replace OLD with NEW in PATH.\n"
            "Only the first occurrence is replaced unless --replace-all is set."
        ),
        formatter_class=_HELP_FORMATTER,
    )
    edit_cmd.add_argument("path")
    edit_cmd.add_argument("old_str")
    edit_cmd.add_argument("new_str")
    edit_cmd.add_argument(
        "--replace-all",
        action="store_true",
        help="Replace every occurrence.",
    )

    sub.add_parser(
        "tools",
        help="List registered tools.",
        description="Show the tools exposed to agents with their parameters.",
        formatter_class=_HELP_FORMATTER,
    )

    return parser


def _load_settings(args: argparse.Namespace) -> EvalSettings:
    """Resolve settings from --config plus per-run flag overrides.

    Example:
        ```python
        settings = _load_settings(args)
        ```
    """
    settings = EvalSettings.from_file(args.config) if args.config else EvalSettings()
    if getattr(args, "timeout", None) is not None:
        settings = EvalSettings(
            python_executable=settings.python_executable,
            timeout_seconds=args.timeout,
            auto_execute=settings.auto_execute,
            log_level=settings.log_level,
            config_path=settings.config_path,
        )
    return settings


def build_engine(args: argparse.Namespace, settings: EvalSettings) -> LocalEngine:
    """Create the engine for `run`, honouring --python over settings.

    Example:
        ```python
        engine = build_engine(args, EvalSettings())
        ```
    """
    return LocalEngine(python_executable=args.python or settings.python_executable)


def _read_code(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    """Return code from the positional argument or --file.

    Example:
        ```python
        code = _read_code(args, parser)
        ```
    """
    if args.file and args.code is not None:
        parser.error("Provide either CODE or --file, not both")
    if args.file:
        try:
            return Path(args.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            parser.error(f"Cannot read --file {args.file}: {exc}")
    if args.code is None:
        parser.error("Provide CODE or --file")
    return args.code


def _print_outcome(outcome: ExecutionOutcome) -> None:
    """Render one outcome as a Rich panel.

    Example:
        ```python
        _print_outcome(Success(result=4, display="4"))
        ```
    """
    if isinstance(outcome, Denied):
        _CONSOLE.print(Panel.fit(Text(outcome.reason), title="Denied", border_style="yellow"))
        return
    if isinstance(outcome, Failure):
        title = outcome.error_type or outcome.kind.value
        _CONSOLE.print(Panel.fit(Text(outcome.error), title=f"Error: {title}", border_style="red"))
        return
    body: Any = Text(outcome.display) if outcome.display else Pretty(None)
    _CONSOLE.print(Panel.fit(body, title="Result", border_style="green"))


def _print_tools() -> None:
    """Render registered tools in a rich table.

    Example:
        ```python
        _print_tools()
        ```
    """
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Parameters", style="magenta")
    table.add_column("Description")
    for name, tool_cls in TOOLS.items():
        params = ", ".join(
            param.name if param.required else f"[{param.name}]" for param in tool_cls.params
        )
        table.add_row(name, params, tool_cls.description.splitlines()[0])
    _CONSOLE.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `evb` CLI command handler.

    Example:
        ```python
        code = main(["run", "--yes", "2 + 2"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        parser.error(str(exc))
    setup_logging(settings.log_level)

    if args.command == "run":
        code = _read_code(args, parser)
        gate = AuthorizationGate.from_settings(settings)
        if args.yes:
            gate.set_auto_execute(True)
        outcome = evaluate(
            ExecutionRequest(code=code, cwd=args.cwd),
            engine=build_engine(args, settings),
            gate=gate,
            settings=settings,
        )
        if args.json:
            _CONSOLE.print_json(json.dumps(outcome.to_dict(), default=repr))
        else:
            _print_outcome(outcome)
        return 0 if outcome.success else 1
    if args.command == "edit":
        response = edit_file(args.path, args.old_str, args.new_str, replace_all=args.replace_all)
        if response.get("success"):
            _CONSOLE.print(
                Panel.fit(
                    Text(f"Replaced {response['replaced']} of {response['matches']} match(es) in {args.path}"),
                    style="bold green",
                )
            )
            return 0
        message = response.get("warning") or response.get("error") or "Edit failed"
        _CONSOLE.print(Panel.fit(Text(message), style="bold yellow" if "warning" in response else "bold red"))
        return 1
    if args.command == "tools":
        _print_tools()
        return 0

    parser.error("Unhandled command")
    return 2
