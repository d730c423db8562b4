"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything is imported.
"""

import os
import sys
from pathlib import Path

# Settings are read once at import time, so these must be set first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Make the shared fixtures visible to every test module
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from test_fixtures import db_session, client  # noqa: E402,F401
