# src/main.py - v1
"""CLI entry point: promote, run, status commands.

Usage:
    floodgate promote <root_folder> --admin-page-uri URI --project-excel-path PATH
    floodgate run <root_folder> --admin-page-uri URI --project-excel-path PATH
    floodgate status <root_folder> [--batch N]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from floodgate.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from floodgate.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="floodgate",
        description=f"floodgate v{__version__} - promote staging content to the primary tree",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- promote ---
    p_promote = subparsers.add_parser(
        "promote", help="Start a promotion job on the configured dispatcher",
    )
    _add_job_arguments(p_promote)
    p_promote.set_defaults(func=_cmd_promote)

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Run a whole promotion job in this process",
    )
    _add_job_arguments(p_run)
    p_run.set_defaults(func=_cmd_run)

    # --- status ---
    p_status = subparsers.add_parser(
        "status", help="Show the status record of a job or batch",
    )
    p_status.add_argument("root_folder", help="Staging root folder of the job")
    p_status.add_argument(
        "--batch", type=int, default=None,
        help="Batch number (default: job-level record)",
    )
    p_status.set_defaults(func=_cmd_status)

    return parser


def _add_job_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("root_folder", help="Staging root folder to promote")
    p.add_argument("--admin-page-uri", required=True, help="Admin page reference")
    p.add_argument("--project-excel-path", required=True, help="Project workbook path")
    p.add_argument(
        "--publish", action="store_true",
        help="Ask downstream stages to publish promoted files",
    )


def _job_params(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "root_folder": args.root_folder,
        "admin_page_uri": args.admin_page_uri,
        "project_excel_path": args.project_excel_path,
        "do_publish": args.publish,
    }


async def _cmd_promote(args: argparse.Namespace, settings: Any) -> int:
    """Start a job and print the start action's result."""
    from floodgate.api.actions import PromotionService
    from floodgate.dispatch.local_dispatcher import LocalDispatcher

    service = PromotionService(settings)
    if isinstance(service.dispatcher, LocalDispatcher):
        service.dispatcher.register(settings.post_copy_action, _post_copy_handoff)

    result = await service.promote(_job_params(args))
    if isinstance(service.dispatcher, LocalDispatcher):
        await service.dispatcher.drain()

    _print_json(result.model_dump(mode="json"))
    return 0 if result.code == 200 else 1


async def _cmd_run(args: argparse.Namespace, settings: Any) -> int:
    """Run every stage in-process and print the resulting records."""
    from floodgate.api.actions import PromotionService
    from floodgate.dispatch.local_dispatcher import LocalDispatcher

    dispatcher = LocalDispatcher()
    service = PromotionService(settings, dispatcher=dispatcher)
    for action, handler in service.handlers().items():
        dispatcher.register(action, handler)
    dispatcher.register(settings.post_copy_action, _post_copy_handoff)

    result = await service.promote(_job_params(args))
    await dispatcher.drain()

    report = await _collect_records(service, args.root_folder)
    _print_json({"result": result.model_dump(mode="json"), **report})
    return 0 if result.code == 200 else 1


async def _cmd_status(args: argparse.Namespace, settings: Any) -> int:
    """Print a persisted status record."""
    from floodgate.status.store_factory import create_status_store
    from floodgate.status.tracker import StatusTracker, status_key

    store = create_status_store(settings)
    try:
        key = status_key(settings.status_key_prefix, args.root_folder, args.batch)
        record = await StatusTracker(store, key).read()
    finally:
        store.close()

    if record.status is None:
        logger.error("No status recorded for %s", key)
        return 1
    _print_json(record.model_dump(mode="json"))
    return 0


async def _collect_records(service: Any, root_folder: str) -> dict[str, Any]:
    """Job record plus every batch's record and failure manifest."""
    from floodgate.batch.manager import BatchManager
    from floodgate.status.tracker import StatusTracker, status_key

    prefix = service.settings.status_key_prefix
    job = await StatusTracker(service.status_store, status_key(prefix, root_folder)).read()
    manager = BatchManager(service.writer, root_folder)

    batches: dict[str, Any] = {}
    for number in await manager.list_batches():
        key = status_key(prefix, root_folder, number)
        record = await StatusTracker(service.status_store, key).read()
        results = await manager.read_results(number)
        batches[str(number)] = {
            "status": record.model_dump(mode="json"),
            "failedPromotes": results.failed_promotes if results else [],
        }
    return {"job": job.model_dump(mode="json"), "batches": batches}


async def _post_copy_handoff(params: dict[str, Any]) -> dict[str, Any]:
    """Stand-in for the post-copy stage when running without a broker."""
    logger.info(
        "Post-copy stage is not hosted in-process; batch %s handed off",
        params.get("batch_number"),
    )
    return {"batch_number": params.get("batch_number")}


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _setup_logging(settings: Any, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from floodgate.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("celery").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
