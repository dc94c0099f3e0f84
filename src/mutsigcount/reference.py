from __future__ import annotations

import logging
from pathlib import Path

import pysam

from .validation import detect_contig_style, remap_contig

logger = logging.getLogger(__name__)


class ReferenceWindow:
    """Fetch ``2w+1`` reference bases centered on a position from an indexed FASTA.

    Parameters
    ----------
    path:
        FASTA file with a faidx index (``samtools faidx``).
    window:
        Number of bases to retrieve up- and downstream of the requested position.
        A window of 1 returns triplets.
    """

    def __init__(self, path: str | Path, window: int) -> None:
        self.path = str(path)
        self.window = int(window)
        try:
            self._fasta = pysam.FastaFile(self.path)
        except (OSError, ValueError) as e:
            raise ValueError(f"Can not open reference '{self.path}': {e}") from e
        self._lengths = dict(zip(self._fasta.references, self._fasta.lengths))
        self._style = detect_contig_style(self._fasta.references)

    def __enter__(self) -> "ReferenceWindow":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._fasta.close()

    def _missing_contig_message(self, contig: str) -> str:
        msg = f"Contig '{contig}' not found in reference {self.path}"
        alt = remap_contig(contig, self._style)
        if alt != contig and alt in self._lengths:
            msg += f" (reference uses '{alt}'; contig naming mismatch, e.g. chr1 vs 1)"
        return msg

    def fetch(self, contig: str, pos0: int) -> str:
        """Return the uppercase window around 0-based ``pos0``.

        Raises ValueError if the window extends beyond the contig bounds.
        """
        length = self._lengths.get(contig)
        if length is None:
            raise ValueError(self._missing_contig_message(contig))

        start = pos0 - self.window
        end = pos0 + self.window + 1
        if start < 0:
            raise ValueError(f"Can not fetch window {self.window} before {pos0}")
        if end > length:
            raise ValueError(
                f"Can not fetch window {self.window} after {pos0} (contig length {length})"
            )
        return self._fasta.fetch(contig, start, end).upper()
