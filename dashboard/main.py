import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError as SettingsValidationError

from dashboard.config.settings import Settings
from dashboard.logging.logger import Log
from dashboard.pipeline.dashboard import DashboardQuery, open_dashboard, require_credentials
from dashboard.pipeline.exceptions import DashboardError, FetchError, ValidationError
from dashboard.pipeline.segments import AnonymousSegment, IndiaSegment
from dashboard.pipeline.time_window import (
    last_day_window,
    normalize_window,
    resolve_timezone,
)
from dashboard.preferences.store import PreferencesStore
from dashboard.render.text_renderer import render_view


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dashboard",
        description="Inspect processed-image records and per-user usage.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    configure = commands.add_parser("configure", help="Save store credentials")
    configure.add_argument("--url", required=True)
    configure.add_argument("--key", required=True)

    filter_cmd = commands.add_parser("filter", help="Show records for a time window")
    filter_cmd.add_argument("--start", help="Local start, YYYY-MM-DDTHH:MM")
    filter_cmd.add_argument("--end", help="Local end, YYYY-MM-DDTHH:MM")
    filter_cmd.add_argument(
        "--last-day", action="store_true", help="Use the 24 hours up to now"
    )
    filter_cmd.add_argument(
        "--anonymous", choices=[s.value for s in AnonymousSegment], default=None
    )
    filter_cmd.add_argument("--india", choices=[s.value for s in IndiaSegment], default=None)
    return parser


def configure(prefs: PreferencesStore, url: str, key: str) -> None:
    url, key = url.strip(), key.strip()
    if not url or not key:
        raise ValidationError("Please provide both store URL and key")
    prefs.save_credentials(url, key)
    Log.info("Configuration saved successfully!")


def resolve_query(
    args: argparse.Namespace,
    prefs: PreferencesStore,
    settings: Settings,
) -> DashboardQuery:
    """Fill unspecified inputs from cached preferences, else the last day."""
    saved = prefs.load()
    tz = resolve_timezone(settings.display_timezone)
    if args.last_day:
        start, end = last_day_window(datetime.now(timezone.utc), tz)
    elif args.start or args.end:
        start, end = args.start, args.end
    elif saved.start_date and saved.end_date:
        start, end = saved.start_date, saved.end_date
    else:
        start, end = last_day_window(datetime.now(timezone.utc), tz)

    anonymous = AnonymousSegment(args.anonymous or saved.anonymous_filter)
    india = IndiaSegment(args.india or saved.india_filter)

    normalize_window(start, end, tz)
    prefs.save_window(start, end)
    prefs.save_filters(anonymous, india)
    return DashboardQuery(start=start, end=end, anonymous=anonymous, india=india)


async def run_filter(settings: Settings, query: DashboardQuery) -> str:
    async with open_dashboard(settings) as dashboard:
        view = await dashboard.filter(query)
    return render_view(view)


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> preferences -> command."""
    try:
        settings = Settings()
    except SettingsValidationError as exc:
        Log.configure("INFO")
        Log.error(f"Invalid configuration: {exc}")
        return 1
    Log.configure(settings.log_level)
    prefs = PreferencesStore(Path(settings.preferences_path))
    args = build_parser().parse_args(argv)

    try:
        if args.command == "configure":
            configure(prefs, args.url, args.key)
            return 0

        saved = prefs.load()
        settings = settings.model_copy(
            update={
                "store_url": settings.store_url or saved.store_url,
                "store_key": settings.store_key or saved.store_key,
            }
        )
        require_credentials(settings)
        query = resolve_query(args, prefs, settings)
        print(asyncio.run(run_filter(settings, query)))
        return 0
    except FetchError as exc:
        Log.error(f"Error fetching data: {exc}")
        return 1
    except DashboardError as exc:
        Log.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
