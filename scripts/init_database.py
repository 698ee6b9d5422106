#!/usr/bin/env python3
"""
Database Initialization Script

Creates the SlopeSense tables and loads resorts, areas and runs from data/seed/.

Usage:
    python scripts/init_database.py [--reset] [--no-seed] [--reseed]

Seeding only runs against an empty resorts table unless --reseed is given.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import settings
from config.database import init_database, drop_database, StorageError
from config.seed import seed_database

def main():
    """Create tables and seed terrain data."""
    parser = argparse.ArgumentParser(description="Initialize the SlopeSense database")
    parser.add_argument("--reset", action="store_true", help="Drop every table first, deleting users, reports and sessions too")
    parser.add_argument("--no-seed", action="store_true", help="Create tables without loading seed CSVs")
    parser.add_argument("--reseed", action="store_true",
                        help="Replace terrain that is already loaded (deletes all reports and clears favorite resorts)")
    args = parser.parse_args()

    settings.configure_logging()
    print("🚀 Initializing SlopeSense Database...")
    print("=" * 50)

    try:
        if args.reset:
            drop_database()
            print("🗑️  Dropped existing tables")

        init_database()
        print("✅ Tables ready")

        if not args.no_seed:
            counts = seed_database(reseed=args.reseed)
            if counts is None:
                print("ℹ️  Terrain already loaded, seed skipped (use --reseed to replace it)")
            else:
                print(f"✅ Seeded {counts['resorts']} resorts, {counts['areas']} areas, {counts['runs']} runs")

        print("\n📊 Database Structure:")
        print("   - resorts: Ski resorts")
        print("   - areas: Areas within each resort")
        print("   - runs: Runs within each area")
        print("   - users: Registered users")
        print("   - reports: Condition reports on runs")
        print("   - web_sessions: Server-side login sessions")

    except (StorageError, OSError, KeyError, ValueError) as e:
        print(f"❌ Error initializing database: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
