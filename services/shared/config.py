"""Service settings read from environment variables.

Nothing here is required at import time; every value has a default suitable
for running the task service and its clients on one machine.
"""
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Where the task service listens
TASK_SERVICE_HOST = os.getenv("TASK_SERVICE_HOST", "0.0.0.0")
TASK_SERVICE_PORT = _env_int("TASK_SERVICE_PORT", 8004)

# Where clients (MCP wrapper, CLI) find the task service
TASK_SERVICE_URL = os.getenv("TASK_SERVICE_URL", f"http://localhost:{TASK_SERVICE_PORT}")

# Timeout for standard CRUD and calendar calls (in seconds)
STANDARD_TIMEOUT = float(os.getenv("TASK_SERVICE_TIMEOUT", "30.0"))

# Logging
LOG_LEVEL = os.getenv("TASK_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("TASK_LOG_DIR") or None
