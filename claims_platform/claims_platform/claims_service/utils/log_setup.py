"""
Logging setup for the claims service: stdout plus an optional log file.
"""
import logging
import os
import sys
from typing import Optional


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "claims_service.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
