from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path


def rotate_logs(log_dir: str, keep_days: int, logf: str | None = None) -> list[Path]:
    """
    Delete `*.log` files in `log_dir` older than `keep_days` days.

    The file currently in use (`logf`) is never removed. Returns the deleted paths.
    """
    directory = Path(log_dir)
    if keep_days <= 0 or not directory.is_dir():
        return []

    cutoff = (datetime.now() - timedelta(days=keep_days)).timestamp()
    current = Path(logf).resolve() if logf else None
    removed: list[Path] = []

    for log_file in directory.glob("*.log"):
        if current is not None and log_file.resolve() == current:
            continue
        if log_file.stat().st_mtime < cutoff:
            log_file.unlink()
            removed.append(log_file)
    return removed
