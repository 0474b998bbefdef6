"""CLI entry point for hashline: anchor-tagged reads and anchor-addressed edits."""
import argparse
from dotenv import load_dotenv
import json
import sys
import traceback
from pathlib import Path

from hashline.anchors.exceptions import AnchorError
from hashline.editing.exceptions import EditingError
from hashline.orchestrator.exceptions import OrchestratorError

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_ANCHOR_ERROR = 2
EXIT_EDITING_ERROR = 3
EXIT_ORCHESTRATOR_ERROR = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

POLICY_CHOICES = ("mark-all", "first-occurrence")
EXECUTOR_CHOICES = ("local", "subprocess")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hashline",
        description="Read files with content-hash line anchors and edit them by anchor",
    )
    parser.add_argument(
        "--policy",
        type=str,
        default=None,
        choices=POLICY_CHOICES,
        help="Which duplicated lines show their anchor (default: mark-all)",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Fail on ambiguous anchors instead of warning"
    )
    parser.add_argument(
        "--executor",
        type=str,
        default=None,
        choices=EXECUTOR_CHOICES,
        help="Where mutations run: in-process or in a worker process (default: local)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Mutation timeout in seconds (default: 10)"
    )
    parser.add_argument("--output-json", action="store_true", help="Output results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")

    sub = parser.add_subparsers(dest="command", required=True)

    read = sub.add_parser("read", help="Print a file, optionally tagged with anchors")
    read.add_argument("path", type=str, help="File to read")
    read.add_argument("--offset", type=int, default=None, help="1-indexed first line")
    read.add_argument("--limit", type=int, default=None, help="Maximum number of lines")
    read.add_argument("--tags", action="store_true", help="Prefix each line with its anchor")

    edit = sub.add_parser("edit", help="Create, insert, replace or delete by anchor")
    edit.add_argument("path", type=str, help="File to edit")
    edit.add_argument("--start", type=str, default=None, help="Anchor of the first line")
    edit.add_argument("--stop", type=str, default=None, help="Anchor of the last line to replace")
    edit.add_argument("--offset", type=int, default=None, help="Offset disambiguator for --start")
    edit.add_argument("--context", type=str, default=None, help="Context disambiguator for --start")
    source = edit.add_mutually_exclusive_group()
    source.add_argument("--content", type=str, default=None, help="New content")
    source.add_argument("--content-file", type=str, default=None, help="Read new content from a file")
    source.add_argument("--stdin", action="store_true", help="Read new content from stdin")

    hash_cmd = sub.add_parser("hash", help="Print the anchor of each argument")
    hash_cmd.add_argument("text", nargs="+", help="Line text to hash")

    resolve = sub.add_parser("resolve", help="Print the line an anchor resolves to")
    resolve.add_argument("path", type=str, help="File to resolve against")
    resolve.add_argument("anchor", type=str, help="Anchor to resolve")
    resolve.add_argument("--offset", type=int, default=None, help="Offset disambiguator")
    resolve.add_argument("--context", type=str, default=None, help="Context disambiguator")

    return parser


def build_config(args: argparse.Namespace):
    """Build a HashlineConfig from the environment, then apply command-line overrides."""
    from hashline.config import HashlineConfig

    overrides: dict[str, object] = {}
    if args.policy is not None:
        overrides["tag_policy"] = args.policy
    if args.strict:
        overrides["strict_ambiguity"] = True
    if args.executor is not None:
        overrides["executor"] = args.executor
    if args.timeout is not None:
        overrides["mutation_timeout"] = args.timeout
    return HashlineConfig(**overrides)


def read_content(args: argparse.Namespace) -> str | None:
    """Return the edit content from --content, --content-file or --stdin."""
    if args.content is not None:
        return args.content
    if args.content_file is not None:
        return Path(args.content_file).read_text(encoding="utf-8")
    if args.stdin:
        return sys.stdin.read()
    return None


def format_result_json(result) -> str:
    """Serialize a result model (or a list of dicts) to a JSON string."""
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json")
    return json.dumps(result, indent=2, default=str)


def run_read(args: argparse.Namespace, config) -> int:
    from hashline.editing.reader import FileReader
    from hashline.models import ReadRequest

    result = FileReader(config=config).read(
        ReadRequest(path=args.path, offset=args.offset, limit=args.limit, tags=args.tags)
    )
    if args.output_json:
        print(format_result_json(result))
    else:
        print(result.text)
    return EXIT_SUCCESS


def run_edit(args: argparse.Namespace, config) -> int:
    from hashline.editing.editor import FileEditor
    from hashline.models import EditRequest

    request = EditRequest(
        path=args.path,
        start=args.start,
        stop=args.stop,
        offset=args.offset,
        context=args.context,
        content=read_content(args),
    )
    result = FileEditor(config=config).edit(request)
    if args.output_json:
        print(format_result_json(result))
        return EXIT_SUCCESS

    print(result.message)
    if result.report is not None and result.report.has_changes:
        print()
        print(result.report.diff)
        print(f"\n{result.report.summary()}")
    return EXIT_SUCCESS


def run_hash(args: argparse.Namespace, config) -> int:
    from hashline.anchors import line_hash

    entries = [{"text": text, "anchor": line_hash(text)} for text in args.text]
    if args.output_json:
        print(format_result_json(entries))
    else:
        for entry in entries:
            print(f"{entry['anchor']}|{entry['text']}")
    return EXIT_SUCCESS


def run_resolve(args: argparse.Namespace, config) -> int:
    from hashline.anchors import resolve_anchor
    from hashline.editing.snapshot import FileSnapshotProvider

    snapshot = FileSnapshotProvider().read(args.path)
    resolved = resolve_anchor(
        snapshot.lines,
        args.anchor,
        offset=args.offset,
        context=args.context,
        policy=config.tag_policy,
        strict=config.strict_ambiguity,
    )
    if args.output_json:
        print(format_result_json(resolved))
        return EXIT_SUCCESS

    print(f"{resolved.anchor} -> line {resolved.line}")
    if resolved.ambiguous:
        candidates = ", ".join(map(str, resolved.candidates))
        print(f"Warning: ambiguous, also matches lines {candidates}", file=sys.stderr)
    return EXIT_SUCCESS


COMMANDS = {
    "read": run_read,
    "edit": run_edit,
    "hash": run_hash,
    "resolve": run_resolve,
}


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    from hashline.utils.logging import configure_logging

    try:
        config = build_config(args)
    except ValueError as exc:
        return _handle_error("Invalid configuration", exc, args.verbose, EXIT_INVALID_INPUT)

    configure_logging(level="DEBUG" if args.verbose else config.log_level, json_output=config.log_json)

    try:
        return COMMANDS[args.command](args, config)

    except AnchorError as exc:
        return _handle_error("Anchor error", exc, args.verbose, EXIT_ANCHOR_ERROR)

    except EditingError as exc:
        return _handle_error("Edit error", exc, args.verbose, EXIT_EDITING_ERROR)

    except OrchestratorError as exc:
        return _handle_error("Orchestrator error", exc, args.verbose, EXIT_ORCHESTRATOR_ERROR)

    except (OSError, ValueError) as exc:
        return _handle_error("Invalid input", exc, args.verbose, EXIT_INVALID_INPUT)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
