from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import matplotlib.pyplot as plt

from .result import ResultMatrix
from .signatures import SignatureCatalog

logger = logging.getLogger(__name__)

SUBSTITUTION_COLORS = {
    "C>A": "#01BFFD",
    "C>G": "#000000",
    "C>T": "#E62725",
    "T>A": "#CBC9C8",
    "T>C": "#A0CE00",
    "T>G": "#F298C3",
}


def _substitution_type(reference: str, alternative: str) -> str:
    return f"{reference}>{alternative}"


def plot_spectrum(
    *,
    catalog: SignatureCatalog,
    matrix: ResultMatrix,
    sample_names: Sequence[str],
    out_png: str | Path,
    title: str = "Substitution spectrum",
) -> None:
    """Bar chart of signature counts, one panel per sample.

    Bars are grouped by substitution type (C>A ... T>G) and, within a group,
    ordered by context.
    """
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)

    entries = sorted(
        catalog.enumerate(),
        key=lambda item: (_substitution_type(item[0].reference, item[0].alternative), item[0].context),
    )
    labels = [sig.context for sig, _ in entries]
    colors = [
        SUBSTITUTION_COLORS[_substitution_type(sig.reference, sig.alternative)] for sig, _ in entries
    ]

    n_panels = max(1, len(sample_names))
    fig, axes = plt.subplots(
        n_panels,
        1,
        figsize=(max(6.0, 0.12 * len(entries)), 2.4 * n_panels),
        squeeze=False,
    )

    for row, ax in enumerate(axes[:, 0]):
        values: List[int] = [0] * len(entries)
        if row < matrix.n_samples:
            values = [matrix.get(vidx, row) for _, vidx in entries]
        ax.bar(range(len(entries)), values, color=colors)
        ax.set_ylabel("Count")
        ax.set_title(sample_names[row] if row < len(sample_names) else "(no samples)")
        ax.set_xlim(-0.5, len(entries) - 0.5)
        if len(entries) <= 96:
            ax.set_xticks(range(len(entries)))
            ax.set_xticklabels(labels, rotation=90, fontsize=6, family="monospace")
        else:
            ax.set_xticks([])

    handles = [plt.Rectangle((0, 0), 1, 1, color=c) for c in SUBSTITUTION_COLORS.values()]
    fig.legend(handles, list(SUBSTITUTION_COLORS.keys()), loc="upper right", ncol=6, fontsize=7)
    fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(out_png, dpi=160)
    plt.close(fig)
    logger.info("Spectrum plot written: %s", out_png)
