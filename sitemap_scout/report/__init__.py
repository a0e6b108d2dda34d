# File: sitemap_scout/report/__init__.py
"""sitemap_scout.report: writing extracted URL lists to disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence, Union


def render_json(urls: Sequence[str], path: Union[str, Path]) -> Path:
    """
    Save *urls* as ``{"count": n, "urls": [...]}`` to *path*.

    :param urls: extracted URLs in output order
    :param path: target JSON file; missing parent directories are created
    :return: Path of the written file
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {"count": len(urls), "urls": list(urls)}
    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output


__all__ = ["render_json"]
