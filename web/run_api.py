"""Run the board web server. Run from project root: python web/run_api.py"""
import logging
import os
import sys
from pathlib import Path

# Add project root to path so club/config imports work
_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root))

import uvicorn

import config

logging.basicConfig(level=config.LOG_LEVEL)

if __name__ == "__main__":
    uvicorn.run(
        "web.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "").lower() in ("1", "true"),
        log_level=config.LOG_LEVEL.lower(),
    )
