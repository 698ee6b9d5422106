#!/usr/bin/env python3
"""
Session Purge Script

Deletes expired login sessions from the web_sessions table. Safe to run from cron.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import settings
from config.database import delete_expired_sessions, StorageError

def main():
    settings.configure_logging()
    try:
        removed = delete_expired_sessions()
    except StorageError as e:
        print(f"❌ Error purging sessions: {e}")
        sys.exit(1)
    print(f"🧹 Removed {removed} expired sessions")

if __name__ == "__main__":
    main()
