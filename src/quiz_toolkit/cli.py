"""
Module: cli

Purpose:
    ``quiz-toolkit`` command line: inspect stored sessions, print
    statistics, export session results, back up and restore the store.

Commands:
    sessions <dataset>                       List sessions, newest activity first
    stats <dataset> [--manifest M]           Latest finished quiz + dataset overview
    export-results <dataset> <session> <csv> --manifest M
    export-backup <file>                     Write every partition to a JSON file
    import-backup <file>                     Restore partitions from a JSON file
    clear                                    Remove every partition

Usage:
    quiz-toolkit --data-dir ./workspace sessions ds1
    quiz-toolkit -v stats ds1 --manifest data/manifest.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from quiz_toolkit import __version__
from quiz_toolkit.catalog import CatalogLoadError, QuestionCatalog, load_manifest
from quiz_toolkit.common.logging_utils import configure_logging, verbosity_to_level
from quiz_toolkit.config import StoreConfig
from quiz_toolkit.core.utils.serialization import decode_session
from quiz_toolkit.export import write_results_csv
from quiz_toolkit.quiz.stats import dataset_overview, exam_breakdown, session_progress
from quiz_toolkit.storage import BackupFormatError, SessionStore

logger = logging.getLogger(__name__)


def _fmt_ms(value) -> str:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not value:
        return "-"
    return datetime.fromtimestamp(value / 1000).strftime("%Y-%m-%d %H:%M")


def _load_catalog(manifest_path: Path, dataset_id: str) -> Optional[QuestionCatalog]:
    manifest = load_manifest(manifest_path)
    if manifest is None:
        return None
    dataset = manifest.get(dataset_id)
    if dataset is None:
        logger.error(f"Dataset {dataset_id!r} not in manifest {manifest_path}")
        return None
    catalog = QuestionCatalog()
    catalog.load(dataset.sources)
    return catalog


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_sessions(store: SessionStore, args: argparse.Namespace) -> int:
    sessions = store.list_sessions(args.dataset)
    if not sessions:
        print(f"No sessions for dataset {args.dataset!r}")
        return 0
    for record in sessions:
        try:
            progress = session_progress(decode_session(record))
        except ValueError as e:
            logger.warning(f"Skipping unreadable session record: {e}")
            continue
        status = "finished" if record.get("finishedAt") else "active"
        print(
            f"{record['id']}  {status:<8}  updated {_fmt_ms(record.get('updatedAt'))}  "
            f"{progress.submitted}/{progress.total} answered, {progress.correct} correct"
        )
    return 0


def cmd_stats(store: SessionStore, args: argparse.Namespace) -> int:
    catalog = None
    if args.manifest:
        try:
            catalog = _load_catalog(args.manifest, args.dataset)
        except CatalogLoadError as e:
            logger.error(f"Could not load questions: {e}")
            return 1

    latest = store.latest_finished_quiz(args.dataset)
    if latest is None:
        print(f"No finished quiz sessions for dataset {args.dataset!r}")
    else:
        session = decode_session(latest)
        progress = session_progress(session)
        print(f"Latest finished session {session.id} ({_fmt_ms(session.finished_at)})")
        print(
            f"  {progress.correct}/{progress.total} correct ({progress.pct_all}% of all, "
            f"{progress.pct_answered}% of answered), {progress.wrong} wrong, {progress.unanswered} unanswered"
        )
        if catalog is not None:
            for exam, exam_progress in exam_breakdown(session, catalog).items():
                print(f"  {exam}: {exam_progress.correct}/{exam_progress.total} correct")

    results = store.latest_answered_results_by_question(args.dataset)
    if catalog is not None:
        overview = dataset_overview((q.id for q in catalog), results)
        print(
            f"Dataset: {overview.total} questions, {overview.correct} correct, "
            f"{overview.wrong} wrong, {overview.unseen} unseen (latest results)"
        )
    else:
        correct = sum(1 for ok in results.values() if ok)
        print(f"Latest results: {len(results)} questions answered, {correct} correct")
    return 0


def cmd_export_results(store: SessionStore, args: argparse.Namespace) -> int:
    record = store.load_session(args.dataset, args.session)
    if record is None:
        logger.error(f"Session {args.session} not found for dataset {args.dataset!r}")
        return 1
    try:
        catalog = _load_catalog(args.manifest, args.dataset)
    except CatalogLoadError as e:
        logger.error(f"Could not load questions: {e}")
        return 1
    if catalog is None:
        return 1
    path = write_results_csv(args.output, decode_session(record), catalog)
    print(f"Wrote {path}")
    return 0


def cmd_export_backup(store: SessionStore, args: argparse.Namespace) -> int:
    payload = store.export_all()
    args.file.parent.mkdir(parents=True, exist_ok=True)
    args.file.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Exported {len(payload)} dataset partition(s) to {args.file}")
    return 0


def cmd_import_backup(store: SessionStore, args: argparse.Namespace) -> int:
    try:
        payload = json.loads(args.file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Could not read backup {args.file}: {e}")
        return 1
    try:
        count = store.import_all(payload)
    except BackupFormatError as e:
        logger.error(str(e))
        return 1
    print(f"Imported {count} dataset partition(s)")
    return 0


def cmd_clear(store: SessionStore, args: argparse.Namespace) -> int:
    count = store.clear_all()
    print(f"Cleared {count} dataset partition(s)")
    return 0


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quiz-toolkit", description="Quiz session store tools")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, help="Directory holding sessions.json (default: app data dir)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("sessions", help="List sessions of a dataset")
    p.add_argument("dataset")
    p.set_defaults(func=cmd_sessions)

    p = sub.add_parser("stats", help="Statistics of a dataset")
    p.add_argument("dataset")
    p.add_argument("--manifest", type=Path, help="Dataset manifest, enables per-exam and coverage figures")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("export-results", help="Write one session's results as CSV")
    p.add_argument("dataset")
    p.add_argument("session")
    p.add_argument("output", type=Path)
    p.add_argument("--manifest", type=Path, required=True)
    p.set_defaults(func=cmd_export_results)

    p = sub.add_parser("export-backup", help="Export all sessions to a JSON file")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_export_backup)

    p = sub.add_parser("import-backup", help="Import sessions from a JSON backup")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_import_backup)

    p = sub.add_parser("clear", help="Delete all stored sessions")
    p.set_defaults(func=cmd_clear)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbosity_to_level(args.verbose))
    store = SessionStore.from_config(StoreConfig.from_env(args.data_dir))
    logger.debug(f"Using session store {store.path}")
    return args.func(store, args)


if __name__ == "__main__":
    sys.exit(main())
