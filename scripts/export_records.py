#!/usr/bin/env python3
"""
Command-line CSV export of stored abstracts and registrations, the headless
counterpart of the dashboard's Export buttons.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from conference.core import config
from conference.core.dashboard import AdminDashboard
from conference.core.kinds import KINDS
from conference.core.notify import FileDownloader, LogNotifier
from conference.core.storage import SqliteStorage


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Export stored conference records to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Export abstracts and registrations
  %(prog)s abstracts                # Export abstract submissions only
  %(prog)s --output-dir /tmp/out    # Write files somewhere else
  %(prog)s --seed-demo              # Replace stored data with the samples first

Environment variables:
- DB_PATH=./data/portal.db
- EXPORT_DIR=./exports
- EXPORT_PREFIX=aieni-2026
        """
    )

    parser.add_argument(
        "kind",
        nargs="?",
        choices=sorted(KINDS) + ["all"],
        default="all",
        help="Record kind to export (default: all)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        default=None,
        help=f"Directory for the CSV files (default: {config.EXPORT_DIR})"
    )

    parser.add_argument(
        "--db-path",
        default=None,
        help="SQLite file to read (default: DB_PATH)"
    )

    parser.add_argument(
        "--seed-demo",
        action="store_true",
        help="Replace stored records with the sample data before exporting"
    )

    args = parser.parse_args(argv)

    dashboard = AdminDashboard(
        SqliteStorage(args.db_path),
        notifier=LogNotifier(),
        downloader=FileDownloader(args.output_dir),
    )
    if args.seed_demo:
        if not dashboard.create_demo_data():
            print("❌ Could not write the sample data")
            return 1
    else:
        dashboard.load()

    kinds = sorted(KINDS) if args.kind == "all" else [args.kind]
    exported = 0
    for name in kinds:
        path = dashboard.export(name)
        if path is None:
            print(f"⚠️  No {KINDS[name].plural} exported")
            continue
        exported += 1
        print(f"✅ {KINDS[name].plural.capitalize()} exported to {path}")

    return 0 if exported else 1


if __name__ == "__main__":
    sys.exit(main())
