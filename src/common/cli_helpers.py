"""Common CLI helper utilities."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools.

    Logs go to stderr so stdout stays free for streamed events.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def save_text_local(content: str, filename: str, output_dir: str = "output") -> Path:
    """Save a text document to a local directory.

    Args:
        content: Text to write (UTF-8).
        filename: File name inside output_dir.
        output_dir: Directory to save to (default: "output").

    Returns:
        Path to the created file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / filename
    with filepath.open("w", encoding="utf-8") as f:
        f.write(content)
    return filepath
