from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


_UCSC_PREFIX = "chr"

# 6 * 4**8 = 393,216 classes; larger windows do not fit a dense matrix sensibly.
MAX_WINDOW = 4


def check_fasta_index(fasta_path: str | Path) -> None:
    """Ensure a FASTA has a faidx index; raise ValueError with fix instructions."""
    fa = Path(fasta_path)
    fai = fa.with_suffix(fa.suffix + ".fai")
    if fai.exists():
        return
    raise ValueError("Reference FASTA is not indexed. Run: samtools faidx " + str(fa))


def check_window(window: int) -> int:
    """Validate the --bases-window parameter and return it as int."""
    try:
        w = int(window)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid window parameter '{window}': not an integer") from None
    if w < 0 or w > MAX_WINDOW:
        raise ValueError(f"Invalid window parameter '{window}': must be between 0 and {MAX_WINDOW}")
    return w


def detect_contig_style(contigs: Iterable[str]) -> str:
    """Infer contig style: 'ucsc' if most contigs start with 'chr', else 'ensembl'."""
    names = [c for c in contigs if c]
    if not names:
        return "unknown"
    chr_like = [c for c in names if c.startswith(_UCSC_PREFIX)]
    if len(chr_like) >= max(1, int(0.5 * len(names))):
        return "ucsc"
    return "ensembl"


def remap_contig(contig: str, style: str) -> str:
    """Remap a contig name to the requested style (ucsc or ensembl)."""
    if style == "ucsc":
        if contig.startswith(_UCSC_PREFIX):
            return contig
        if contig == "MT":
            return "chrM"
        return f"{_UCSC_PREFIX}{contig}"
    if style == "ensembl":
        if contig.startswith(_UCSC_PREFIX):
            core = contig[len(_UCSC_PREFIX) :]
            if core == "M":
                return "MT"
            return core
        return contig
    return contig
