"""
Database initialization script.

Creates the training_sessions and players tables (use Alembic for
managed databases).

Usage:
    python scripts/init_db.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from academy.core.config import settings
from academy.core.logger import setup_logger
from academy.db.init_db import init_db

if __name__ == "__main__":
    setup_logger(level=settings.LOG_LEVEL)
    print("=" * 50)
    print("Academy Sessions Database Initialization")
    print("=" * 50)
    print()

    try:
        init_db()
        print()
        print("=" * 50)
        print("SUCCESS: Database initialized!")
        print("=" * 50)
        sys.exit(0)

    except Exception as e:
        print()
        print("=" * 50)
        print("ERROR: Database initialization failed!")
        print(f"Details: {e}")
        print("=" * 50)
        sys.exit(1)
