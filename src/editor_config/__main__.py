"""Command-line host for the editor config runtime.

Reads a script and JSON inputs from files, runs one operation and prints the
result as JSON.
"""

import argparse
import sys
from pathlib import Path
from typing import Any

from .core import EditorConfigError, configure_logging_from_settings, get_settings, load_json, safe_json_dumps
from .evaluator import EditorConfigEvaluator


def _read_json(path: str | None, name: str, default: Any) -> Any:
    if path is None:
        return default
    return load_json(Path(path).read_bytes(), name)


def _cmd_evaluate(evaluator: EditorConfigEvaluator, args: argparse.Namespace, config: str) -> Any:
    values = _read_json(args.values, "values", {})
    definition = _read_json(args.definition, "widget definition", {})
    return evaluator.evaluate(config, values, definition).model_dump(mode="json", by_alias=True)


def _cmd_visible_keys(evaluator: EditorConfigEvaluator, args: argparse.Namespace, config: str) -> Any:
    values = _read_json(args.values, "values", {})
    definition = _read_json(args.definition, "widget definition", {})
    return evaluator.get_visible_property_keys(config, values, definition)


def _cmd_validate(evaluator: EditorConfigEvaluator, args: argparse.Namespace, config: str) -> Any:
    values = _read_json(args.values, "values", {})
    return [error.model_dump(mode="json") for error in evaluator.validate(config, values)]


def _cmd_counts(evaluator: EditorConfigEvaluator, args: argparse.Namespace, config: str) -> Any:
    values = _read_json(args.values, "values", {})
    definition = _read_json(args.definition, "widget definition", {})
    return evaluator.get_property_visibility_with_counts(config, values, definition).model_dump(mode="json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editor-config",
        description="Evaluate widget editor config scripts",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: from settings)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs on stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    commands = (
        ("evaluate", _cmd_evaluate, True, "Filter properties and validate values"),
        ("visible-keys", _cmd_visible_keys, True, "Print visible property keys (null without getProperties)"),
        ("validate", _cmd_validate, False, "Print validation errors"),
        ("counts", _cmd_counts, True, "Print visible keys and per-group counts"),
    )
    for name, handler, needs_definition, help_text in commands:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--config", "-c", required=True, help="Editor config script")
        cmd.add_argument("--values", "-v", default=None, help="JSON file with current values (default: {})")
        if needs_definition:
            cmd.add_argument("--definition", "-d", required=True, help="JSON file with propertyGroups")
        cmd.set_defaults(handler=handler)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging_from_settings(settings, level=args.log_level, json_logs=args.json_logs or None)

    try:
        config = Path(args.config).read_text(encoding="utf-8")
        output = args.handler(EditorConfigEvaluator(settings), args, config)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except EditorConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(safe_json_dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
