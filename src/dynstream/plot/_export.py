# src/dynstream/plot/_export.py
from __future__ import annotations
from pathlib import Path
import matplotlib.pyplot as plt

__all__ = ["savefig", "close"]


def _as_fig(obj) -> plt.Figure:
    if hasattr(obj, "figure") and obj.figure is not None:
        return obj.figure  # Axes -> Figure
    return obj


def savefig(
    fig_or_ax,
    path: str | Path,
    *,
    size: tuple[float, float] | None = (6.0, 4.0),
    dpi: int = 100,
) -> Path:
    """
    Save a figure (or axes.figure) to ``path``; the format follows the suffix
    and defaults to PDF when there is none. Parent directories are created.
    """
    fig = _as_fig(fig_or_ax)
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(".pdf")
    target.parent.mkdir(parents=True, exist_ok=True)
    if size is not None:
        fig.set_size_inches(*size)
    fig.savefig(target, dpi=dpi, bbox_inches="tight")
    return target


def close(fig_or_ax) -> None:
    plt.close(_as_fig(fig_or_ax))
