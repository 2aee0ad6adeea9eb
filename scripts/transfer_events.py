#!/usr/bin/env python3
"""Export the saved calendar events to JSON, or import a browser export.

The file format is the same JSON array the browser widget keeps under its
``calendarEvents`` key, so a ``localStorage`` dump can be loaded directly.

Usage:  python -m scripts.transfer_events export --output events.json
        python -m scripts.transfer_events import events.json [--replace]
"""
import argparse
import json
from pathlib import Path

from app import app
from backend.events import event_from_dict, event_to_dict

BASE_DIR = Path(__file__).resolve().parents[1]


def resolve_path(path_value: str, base_dir: Path) -> Path:
    path = Path(path_value)
    if path.is_absolute():
        return path
    return (base_dir / path).resolve()


def load_events_file(path: Path, tz=None):
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Could not read {path}: {exc}")
    if not isinstance(data, list):
        raise SystemExit(f"{path} must contain a JSON array of events")
    try:
        return [event_from_dict(item, tz) for item in data]
    except ValueError as exc:
        raise SystemExit(f"Invalid event in {path}: {exc}")


def merge_events(existing, incoming, replace=False):
    """Return the collection to save and the number of events taken from ``incoming``."""
    if replace:
        return tuple(incoming), len(incoming)
    known = {ev.id for ev in existing}
    added = []
    for ev in incoming:
        if ev.id not in known:
            known.add(ev.id)
            added.append(ev)
    return tuple(existing) + tuple(added), len(added)


def export_events(store, output_path: Path) -> int:
    events = store.list()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps([event_to_dict(ev) for ev in events], indent=2), encoding="utf-8")
    return len(events)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export or import saved calendar events.")
    sub = parser.add_subparsers(dest="command", required=True)

    export_parser = sub.add_parser("export", help="Write saved events to a JSON file.")
    export_parser.add_argument(
        "--output",
        default="instance/calendar_events.json",
        help="Destination file, relative to the repo root (default: instance/calendar_events.json).",
    )

    import_parser = sub.add_parser("import", help="Load events from a JSON file.")
    import_parser.add_argument(
        "input",
        help="JSON array of events, e.g. a localStorage export (relative to the repo root).",
    )
    import_parser.add_argument(
        "--replace",
        action="store_true",
        help="Replace all saved events instead of adding the ones with new ids.",
    )
    args = parser.parse_args(argv)

    with app.app_context():
        store = app.extensions["event_store"]
        if args.command == "export":
            output_path = resolve_path(args.output, BASE_DIR)
            count = export_events(store, output_path)
            print(f"Exported {count} events to {output_path}")
            return 0

        input_path = resolve_path(args.input, BASE_DIR)
        incoming = load_events_file(input_path, store.tz)
        events, count = merge_events(store.list(), incoming, replace=args.replace)
        store.replace_all(events)
        print(f"Imported {count} events from {input_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
