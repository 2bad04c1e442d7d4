"""
Terminal front desk for the Visitor Management System.
Reads commands from stdin; pass --gui to open the Tkinter window instead.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from utils import EmptyField, configure_logging, export_session, require_fields
from visitors import VisitorRegistry, VisitorNotFound, describe_view

HELP = """Commands:
  in <name> | <contact>   check a visitor in
  out <name>              check the first matching visitor out
  current                 list visitors currently inside
  log                     show the activity log
  table                   show every visit
  export                  write the table and log as CSV
  help                    show this text
  quit                    leave"""


def handle_command(registry: VisitorRegistry, line: str, export_dir: Optional[Path] = None) -> bool:
    """
    Run one command line against the registry.
    Returns False when the session should end.
    """
    command, _, rest = line.strip().partition(" ")
    command = command.lower()
    if not command:
        return True
    if command in ("quit", "exit", "q"):
        return False
    if command == "help":
        print(HELP)
    elif command == "in":
        name, _, contact = rest.partition("|")
        try:
            fields = require_fields(Name=name, Contact=contact)
        except EmptyField:
            print("Name and Contact cannot be empty.", file=sys.stderr)
            return True
        view = registry.check_in(fields["Name"], fields["Contact"])
        print(f"Checked in: {describe_view(view)}")
    elif command == "out":
        try:
            name = require_fields(Name=rest)["Name"]
            view = registry.check_out(name)
        except EmptyField:
            print("Name cannot be empty.", file=sys.stderr)
        except VisitorNotFound as e:
            print(str(e), file=sys.stderr)
        else:
            print(f"Checked out: {describe_view(view)}")
    elif command == "current":
        print("Current Visitors:")
        for view in registry.list_current_visitors():
            print(describe_view(view))
    elif command == "log":
        print("Visitor Log:")
        for entry in registry.get_log():
            print(entry)
    elif command == "table":
        for row in registry.snapshot_table():
            print(" | ".join(row))
    elif command == "export":
        try:
            table_path, log_path = export_session(registry, export_dir)
        except OSError as e:
            print(f"Export failed: {e}", file=sys.stderr)
        else:
            print(f"Saved {table_path} and {log_path}")
    else:
        print(f"Unknown command '{command}'. Type 'help'.", file=sys.stderr)
    return True


def run_session(registry: VisitorRegistry, stream: Optional[TextIO] = None, export_dir: Optional[Path] = None) -> None:
    if stream is None:
        stream = sys.stdin
    print("Visitor Management System. Type 'help' for commands.")
    for line in stream:
        if not handle_command(registry, line, export_dir):
            break


def main(argv: Optional[list[str]] = None):
    import argparse
    parser = argparse.ArgumentParser(description="Front desk visitor check-in / check-out.")
    parser.add_argument("--gui", action="store_true", help="Open the Tkinter window")
    parser.add_argument("--export-dir", type=Path, default=None, help="Directory for CSV exports")
    parser.add_argument("--log-level", default=None, help="Logging level (default from VISITOR_LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))
    registry = VisitorRegistry()
    if args.gui:
        from gui import VisitorGUI
        VisitorGUI(registry, export_dir=args.export_dir).run()
    else:
        run_session(registry, export_dir=args.export_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
