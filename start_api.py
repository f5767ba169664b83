#!/usr/bin/env python3
"""
Create tables, then seed, then uvicorn.
Ensures tables exist before seed and app start.
"""
import os
import sys

from skyreserve.core.logging import configure_logging
from skyreserve.db.session import init_db
from skyreserve.seed import run as run_seed

configure_logging()

# 1) Tables (create_all; existing tables are left alone)
init_db()

# 2) Demo data
run_seed()

# 3) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "skyreserve.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)
