"""
TrackLife command line interface.

Manages tracker data in the configured storage and serves the status API.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .aggregation.budget import category_spending, month_summary
from .aggregation.dashboard import wellness_scores
from .aggregation.habit import completion_stats, toggle_patch
from .aggregation.mood import mood_label, mood_stats
from .aggregation.period import cycle_stats
from .aggregation.sleep import calculate_duration, sleep_stats
from .aggregation.water import water_stats
from .aggregation.workout import workout_stats
from .config import config_manager, get_config
from .core.enums import Domain
from .domain.records import DatedRecord, SleepEntry, new_record_id, today_iso
from .storage.interfaces import KeyValueStorage
from .store.domain_store import DomainStore, RecordValidationError
from .store.registry import TrackerStores, UnknownDomainError
from .utils.logging_config import get_module_logger, initialize_logging

logger = get_module_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    domains = [d.value for d in Domain]
    parser = argparse.ArgumentParser(
        prog="tracklife",
        description="Personal self-tracking: sleep, period, workouts, habits, budget, mood and water",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tracklife add water --json '{"amount": 1, "timestamp": "08:30"}'
  tracklife add sleep --json '{"date": "2024-01-01", "bedtime": "22:30", "wakeTime": "07:00", "quality": 7}'
  tracklife list budget --categories
  tracklife reset --all
  tracklife config set app.water_daily_goal 10
  tracklife serve --port 8000
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the status API server")
    serve.add_argument("--host", help="Bind address (default: from config)")
    serve.add_argument("--port", type=int, help="Port (default: from config)")

    list_cmd = subparsers.add_parser("list", help="Print a tracker's records as JSON")
    list_cmd.add_argument("domain", choices=domains)
    list_cmd.add_argument("--categories", action="store_true", help="Budget: list categories instead of entries")

    add = subparsers.add_parser("add", help="Add a record")
    add.add_argument("domain", choices=domains)
    add.add_argument("--json", dest="payload", required=True, help="Record fields as a JSON object")
    add.add_argument("--categories", action="store_true", help="Budget: add a category instead of an entry")

    update = subparsers.add_parser("update", help="Merge fields into the record with this id")
    update.add_argument("domain", choices=domains)
    update.add_argument("record_id")
    update.add_argument("--json", dest="payload", required=True, help="Fields to change as a JSON object")
    update.add_argument("--categories", action="store_true", help="Budget: update a category")

    delete = subparsers.add_parser("delete", help="Delete the record with this id")
    delete.add_argument("domain", choices=domains)
    delete.add_argument("record_id")
    delete.add_argument("--categories", action="store_true", help="Budget: delete a category")

    toggle = subparsers.add_parser("toggle", help="Flip a habit's completion for today")
    toggle.add_argument("habit_id")

    reset = subparsers.add_parser("reset", help="Reset one tracker, or all of them with --all")
    reset.add_argument("domain", nargs="?", choices=domains)
    reset.add_argument("--all", action="store_true", help="Reset every tracker")

    subparsers.add_parser("summary", help="Print today's overview across trackers")

    config_cmd = subparsers.add_parser("config", help="Show or change settings")
    config_sub = config_cmd.add_subparsers(dest="config_action", required=True)
    config_sub.add_parser("show", help="Print the current configuration as JSON")
    config_set = config_sub.add_parser("set", help="Change one setting, e.g. app.water_daily_goal 10")
    config_set.add_argument("key", help="SECTION.FIELD")
    config_set.add_argument("value", help="New value (parsed as JSON when possible)")

    return parser


def _select_store(stores: TrackerStores, domain: str, categories: bool) -> DomainStore:
    if categories:
        if domain != Domain.BUDGET.value:
            raise UnknownDomainError(f"{domain} categories")
        return stores.budget.categories
    return stores.record_store(domain)


def _parse_payload(raw: str) -> Dict[str, Any]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("--json must be a JSON object")
    return data


def complete_payload(store: DomainStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in what a caller may leave out: id, today's date and the sleep duration."""
    data = dict(data)
    data.setdefault("id", new_record_id())
    if issubclass(store.record_type, DatedRecord):
        data.setdefault("date", today_iso())
    if issubclass(store.record_type, SleepEntry) and "duration" not in data:
        wake_time = data.get("wakeTime", data.get("wake_time"))
        if data.get("bedtime") and wake_time:
            data["duration"] = calculate_duration(data["bedtime"], wake_time)
    return data


def complete_patch(store: DomainStore, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Recompute the sleep duration when a patch moves bedtime or wake time."""
    patch = dict(patch)
    if not issubclass(store.record_type, SleepEntry) or "duration" in patch:
        return patch
    touched = {store.record_type.field_for_key(key) for key in patch}
    if not touched & {"bedtime", "wake_time"}:
        return patch
    current = store.get(record_id)
    if current is None:
        return patch
    bedtime = patch.get("bedtime", current.bedtime)
    wake_time = patch.get("wakeTime", patch.get("wake_time", current.wake_time))
    if not isinstance(bedtime, str) or not isinstance(wake_time, str):
        return patch
    patch["duration"] = calculate_duration(bedtime, wake_time)
    return patch


def _print_records(records: List[Any]) -> None:
    print(json.dumps([r.to_storage() for r in records], indent=2))


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    config = get_config()
    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info(f"Starting TrackLife API on {host}:{port}")
    uvicorn.run(
        "tracklife.main:app",
        host=host,
        port=port,
        reload=config.server.auto_reload,
        log_level="debug" if config.server.debug else "info",
    )
    return EXIT_OK


def _parse_setting(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def cmd_config(args: argparse.Namespace) -> int:
    config = config_manager.config or config_manager.load_config()
    if args.config_action == "show":
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_OK

    section, _, field_name = args.key.partition(".")
    current = config.to_dict()
    if section not in current or field_name not in current[section]:
        print(f"Error: unknown setting '{args.key}'", file=sys.stderr)
        return EXIT_USAGE

    current_value = current[section][field_name]
    value = _parse_setting(args.value)
    if isinstance(current_value, (int, float)) and not isinstance(current_value, bool):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            print(f"Error: setting '{args.key}' expects a number", file=sys.stderr)
            return EXIT_USAGE
        value = type(current_value)(value)
    elif current_value is not None and not isinstance(value, type(current_value)):
        print(f"Error: setting '{args.key}' expects {type(current_value).__name__}", file=sys.stderr)
        return EXIT_USAGE

    if not config_manager.update_config({args.key: value}):
        print(f"Error: could not save setting '{args.key}'", file=sys.stderr)
        return EXIT_ERROR

    for issue in config_manager.validate_config():
        print(f"Warning: {issue}", file=sys.stderr)
    return EXIT_OK


def cmd_summary(stores: TrackerStores) -> int:
    config = get_config()
    sleep = stores.sleep.get_all()
    workouts = stores.workout.get_all()
    habits = stores.habits.get_all()
    moods = stores.mood.get_all()
    water = stores.water.get_all()

    s_stats = sleep_stats(sleep)
    print(f"Sleep:    avg {s_stats.avg_duration if s_stats.avg_duration is not None else 'N/A'} h, "
          f"quality {s_stats.avg_quality if s_stats.avg_quality is not None else 'N/A'}")

    cycle = cycle_stats(stores.period.get_all())
    if cycle.next_period_date:
        print(f"Period:   next in {cycle.days_until_next} days ({cycle.cycle_phase.value} phase)")
    else:
        print("Period:   no period logged yet")

    w_stats = workout_stats(workouts)
    print(f"Workout:  {w_stats.weekly_workouts} this week, streak {w_stats.streak}")

    h_stats = completion_stats(habits)
    print(f"Habits:   {h_stats.today}% of today's habits done ({h_stats.total} tracked)")

    budget = month_summary(stores.budget.entries.get_all())
    print(f"Budget:   spent {budget.total_expenses:.2f}, income {budget.total_income:.2f}, "
          f"balance {budget.balance:.2f}")
    for row in category_spending(stores.budget.entries.get_all(), stores.budget.categories.get_all()):
        if row["spent"]:
            print(f"          {row['name']}: {row['spent']:.2f} / {row['limit']:.2f} ({row['percentage']}%)")

    m_stats = mood_stats(moods)
    print(f"Mood:     today {mood_label(m_stats.today_mood)}, average {m_stats.average_mood}")

    water_summary = water_stats(water, daily_goal=config.app.water_daily_goal)
    print(f"Water:    {water_summary.today_amount:g} / {water_summary.daily_goal:g} glasses "
          f"({water_summary.completion}%)")

    scores = wellness_scores(
        sleep, workouts, habits, moods, water,
        water_goal=config.app.water_daily_goal,
        workout_target=config.app.workout_weekly_target,
        ideal_sleep_hours=config.app.ideal_sleep_hours,
    )
    print("Wellness: " + ", ".join(f"{s['category']} {s['score']}" for s in scores))
    return EXIT_OK


def run_command(args: argparse.Namespace, stores: TrackerStores) -> int:
    """Dispatch a parsed command against the given stores."""
    if args.command == "list":
        _print_records(_select_store(stores, args.domain, args.categories).get_all())
    elif args.command == "add":
        store = _select_store(stores, args.domain, args.categories)
        record = store.add_from_dict(complete_payload(store, _parse_payload(args.payload)))
        print(record.id)
    elif args.command == "update":
        store = _select_store(stores, args.domain, args.categories)
        store.update(args.record_id, complete_patch(store, args.record_id, _parse_payload(args.payload)))
    elif args.command == "delete":
        _select_store(stores, args.domain, args.categories).delete(args.record_id)
    elif args.command == "toggle":
        habit = stores.habits.get(args.habit_id)
        if habit is None:
            print(f"No habit with id {args.habit_id}", file=sys.stderr)
            return EXIT_ERROR
        stores.habits.update(habit.id, toggle_patch(habit))
    elif args.command == "reset":
        if args.all:
            stores.reset_all()
        elif args.domain:
            stores.for_domain(args.domain).reset()
        else:
            print("reset needs a domain or --all", file=sys.stderr)
            return EXIT_USAGE
    elif args.command == "summary":
        return cmd_summary(stores)
    return EXIT_OK


def main(argv: Optional[List[str]] = None, storage: Optional[KeyValueStorage] = None) -> int:
    """Entry point for the ``tracklife`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    initialize_logging()

    if args.command == "serve":
        return cmd_serve(args)
    if args.command == "config":
        return cmd_config(args)

    if storage is None:
        from .storage.dependencies import get_storage

        storage = get_storage()

    try:
        return run_command(args, TrackerStores(storage))
    except (RecordValidationError, UnknownDomainError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.info(f"Command '{args.command}' rejected: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
