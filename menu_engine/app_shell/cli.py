import argparse
import asyncio
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

from menu_engine.adapters.http_menu_source import HttpMenuSource
from menu_engine.components.experiments import BuildReportInput, run_build_report
from menu_engine.components.ordering import (
    BuildFeedInput,
    ValidateSchedulesInput,
    parse_hhmm,
    run_build_feed,
    run_validate_schedules,
)
from menu_engine.domain.entities import MenuSnapshot
from menu_engine.ports.menu_source import MenuSourceError, MenuSourcePort
from menu_engine.rules.adapter import RulesAdapter
from menu_engine.rules.loader import RulesValidationError, load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

RULES_PATH = os.environ.get("MENU_ENGINE_RULES", "rules.yaml")


def get_rules(path: str) -> RulesAdapter:
    try:
        rules = load_rules(Path(path))
    except (FileNotFoundError, RulesValidationError) as e:
        logger.error("Cannot load rules: %s", e)
        sys.exit(1)

    backend_url = os.environ.get("MENU_ENGINE_BACKEND_URL")
    if backend_url:
        backend = rules.backend.model_copy(update={"base_url": backend_url})
        rules = rules.model_copy(update={"backend": backend})
    return RulesAdapter(rules)


def parse_at(value: str) -> datetime:
    """``--at HH:MM`` as today's UTC time."""
    minutes = parse_hhmm(value)
    if minutes is None:
        raise argparse.ArgumentTypeError(f"Invalid time '{value}', expected HH:MM")
    now = datetime.now(UTC)
    return now.replace(hour=minutes // 60, minute=minutes % 60, second=0, microsecond=0)


def fetch(source: MenuSourcePort, owner_id: str, menu_id: str, variant: str) -> MenuSnapshot:
    try:
        return asyncio.run(source.fetch_menu(owner_id, menu_id, variant))  # type: ignore[arg-type]
    except MenuSourceError as e:
        logger.error("Menu fetch failed: %s", e)
        sys.exit(1)


def handle_feed(source: MenuSourcePort, args: argparse.Namespace) -> None:
    snapshot = fetch(source, args.owner_id, args.menu_id, args.variant)
    feed = run_build_feed(
        BuildFeedInput(
            items=snapshot.items,
            schedules=snapshot.override_schedules,
            now_utc=args.at or datetime.now(UTC),
        )
    )
    for category in feed.categories:
        print(f"[{category.name}]")
        for position, item in enumerate(category.items, start=1):
            order = "-" if item.display_order is None else item.display_order
            print(f"  {position:>3}. {item.name} ({item.price or 'n/a'}, order {order})")


def handle_report(source: MenuSourcePort, rules: RulesAdapter, args: argparse.Namespace) -> None:
    try:
        control, test = asyncio.run(source.fetch_experiment(args.owner_id, args.menu_id))
    except MenuSourceError as e:
        logger.error("Menu fetch failed: %s", e)
        sys.exit(1)

    report = run_build_report(
        BuildReportInput(control=control.items, test=test.items, include_insignificant=args.all),
        rules=rules,
    )

    print(f"{report.significant_count} of {report.total_items} items changed significantly.")
    for entry in report.entries:
        print(f"\n{entry.result.name}")
        for explanation in entry.explanations:
            print(f"  * {explanation.title}: {explanation.description}")
            for detail in explanation.details:
                print(f"      {detail}")


def handle_validate(source: MenuSourcePort, args: argparse.Namespace) -> None:
    snapshot = fetch(source, args.owner_id, args.menu_id, "control")
    out = run_validate_schedules(
        ValidateSchedulesInput(
            schedules=snapshot.override_schedules,
            item_names=frozenset(item.name for item in snapshot.items),
        )
    )
    if out.success:
        print(f"{len(snapshot.override_schedules)} schedules OK.")
        return
    for error in out.errors:
        print(f"[{error.code}] schedule {error.index}: {error.message}")
    sys.exit(2)


def main() -> None:
    parser = argparse.ArgumentParser(description="Menu Engine CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # feed
    feed_parser = subparsers.add_parser("feed", help="Print the resolved menu feed")
    feed_parser.add_argument("owner_id")
    feed_parser.add_argument("menu_id")
    feed_parser.add_argument("--variant", choices=["control", "test"], default="control")
    feed_parser.add_argument("--at", type=parse_at, help="Resolve at HH:MM UTC instead of now")

    # report
    report_parser = subparsers.add_parser("report", help="Print the experiment report")
    report_parser.add_argument("owner_id")
    report_parser.add_argument("menu_id")
    report_parser.add_argument("--all", action="store_true", help="Include unchanged items")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Check override schedules")
    validate_parser.add_argument("owner_id")
    validate_parser.add_argument("menu_id")

    args = parser.parse_args()

    rules = get_rules(args.rules)
    source = HttpMenuSource.from_rules(rules.rules.backend)

    if args.command == "feed":
        handle_feed(source, args)
    elif args.command == "report":
        handle_report(source, rules, args)
    elif args.command == "validate":
        handle_validate(source, args)


if __name__ == "__main__":
    main()
