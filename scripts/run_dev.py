"""
Development server launcher.

Loads .env file and runs the academy sessions API with uvicorn in reload mode.

Usage:
    python scripts/run_dev.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file
from dotenv import load_dotenv

load_dotenv()

import uvicorn

from academy.core.config import settings

if __name__ == "__main__":
    print("=" * 60)
    print("Academy Sessions Development Server")
    print("=" * 60)
    print()
    print(f"Database: {settings.DATABASE_URL.split('@')[-1]}")
    print("API: http://localhost:8000/api/v1/sessions")
    print("Docs: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop")
    print("=" * 60)

    uvicorn.run("academy.main:app", host="0.0.0.0", port=8000, reload=True, log_level=settings.LOG_LEVEL.lower())
