"""Command-line interface for cloning templates inside a JSON snapshot.

The tool loads a snapshot of collections into an in-memory store, runs either
a clone job or an orphan sweep against it, and optionally writes the
resulting snapshot back out. It is useful for checking a template before it is
published and for inspecting what a sweep would delete.

Usage:
    slate-clone clone snapshot.json --owner-id U1 --namespace ORG1 --source-root SomJJD3bEqn2yHhXW79e -o out.json
    slate-clone sweep snapshot.json --grace-period 0 --dry-run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from slate_clone.clone import OrphanReconciler, clone_template_for
from slate_clone.core.config import CloneConfig
from slate_clone.core.logging_config import configure_logging
from slate_clone.store import InMemoryDocumentStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slate-clone",
        description="Clone a template project, or sweep unowned clones, inside a JSON snapshot",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Increase logging verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    clone = subparsers.add_parser("clone", help="Clone the template for one owner")
    clone.add_argument("snapshot", type=Path, help="JSON snapshot of collections")
    clone.add_argument("--owner-id", required=True, help="User the clone is created for")
    clone.add_argument("--namespace", required=True, help="Namespace (organization) of the owner")
    clone.add_argument("--source-root", required=True, help="Id of the template project")
    clone.add_argument("--batch-size", type=int, default=None, help="Maximum writes per batch")
    clone.add_argument("--name", default=None, help="Name given to the cloned project")
    clone.add_argument("--description", default=None, help="Description given to the cloned project")
    clone.add_argument(
        "--no-template-fallback",
        action="store_true",
        help="Fail instead of using another template when --source-root does not exist",
    )
    clone.add_argument("--output", "-o", type=Path, default=None, help="Write the resulting snapshot here")

    sweep = subparsers.add_parser("sweep", help="Delete clones that never received an owner")
    sweep.add_argument("snapshot", type=Path, help="JSON snapshot of collections")
    sweep.add_argument("--grace-period", type=float, default=None, help="Minimum age in seconds of a swept clone")
    sweep.add_argument("--dry-run", action="store_true", help="Report orphans without deleting them")
    sweep.add_argument("--output", "-o", type=Path, default=None, help="Write the resulting snapshot here")

    return parser


def _run_clone(args: argparse.Namespace, store: InMemoryDocumentStore, level: int) -> int:
    settings = {
        "source_root_id": args.source_root,
        "clone_name": args.name,
        "clone_description": args.description,
        "template_fallback": not args.no_template_fallback,
        "logging_level": level,
    }
    if args.batch_size is not None:
        settings["max_batch_size"] = args.batch_size
    config = CloneConfig(**settings)
    configure_logging(level=config.logging_level)

    outcome = clone_template_for(store, config, args.owner_id, args.namespace)
    print(outcome.job.to_text())
    return 0 if outcome.ok or outcome.duplicate else 1


def _run_sweep(args: argparse.Namespace, store: InMemoryDocumentStore, level: int) -> int:
    settings = {"logging_level": level}
    if args.grace_period is not None:
        settings["orphan_grace_period_seconds"] = args.grace_period
    config = CloneConfig(**settings)
    configure_logging(level=config.logging_level)
    report = OrphanReconciler(store, config).sweep(dry_run=args.dry_run)
    print(json.dumps(report.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the clone CLI.

    Returns:
        Exit code (0 for success, 1 for a failed clone, 2 for bad input).
    """
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)

    if not args.snapshot.exists():
        print(f"Error: Snapshot not found: {args.snapshot}", file=sys.stderr)
        return 2
    store = InMemoryDocumentStore.from_snapshot(args.snapshot)

    try:
        if args.command == "clone":
            code = _run_clone(args, store, level)
        else:
            code = _run_sweep(args, store, level)
    except ValidationError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.output is not None and not (args.command == "sweep" and args.dry_run):
        store.dump(args.output)
    return code


if __name__ == "__main__":
    sys.exit(main())
