"""loguru sinks for GA runs: one stderr sink, one rotating file per run."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import sys
from typing import Any, Mapping

from loguru import logger

# loguru strips the color tags on sinks that are not colorized
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


def setup_logger(
    logging_cfg: Mapping[str, Any],
    run_name: str,
    output_dir: str | Path | None = None,
) -> Path:
    """Replace loguru's sinks with a console sink and a per-run log file.

    Args:
        logging_cfg: The ``logging`` block of the run config. Reads
            ``log_dir`` and, optionally, ``level``, ``rotation`` and
            ``retention``.
        run_name: Prefix of the log file name, usually the problem name.
        output_dir: Base directory for a relative ``log_dir`` (Hydra's run
            output dir); the current directory when omitted.

    Returns:
        Path of the log file.
    """
    log_dir = Path(logging_cfg["log_dir"])
    if output_dir is not None and not log_dir.is_absolute():
        log_dir = Path(output_dir) / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"{run_name}_{timestamp}.log"
    level = logging_cfg.get("level", "INFO")

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=None)
    logger.add(
        log_file,
        level=level,
        format=LOG_FORMAT,
        colorize=False,
        rotation=logging_cfg.get("rotation", "50 MB"),
        retention=logging_cfg.get("retention", "30 days"),
        encoding="utf-8",
    )

    logger.debug("[setup_logger] level={}, file={}", level, log_file)
    return log_file
