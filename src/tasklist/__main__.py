"""tasklist entrypoint.

Run with:
  python -m tasklist
"""

import os
import uvicorn

from tasklist.logging_setup import setup_logging


def main() -> None:
    setup_logging()
    host = os.getenv("TASKLIST_HOST", "0.0.0.0")
    port = int(os.getenv("TASKLIST_PORT", "5000"))
    reload = os.getenv("TASKLIST_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("tasklist.app:app", host=host, port=port, reload=reload, log_config=None)

if __name__ == "__main__":
    main()
