from __future__ import annotations

import logging
from typing import Sequence, TextIO

from .result import ResultMatrix
from .signatures import SignatureCatalog

logger = logging.getLogger(__name__)


def write_counts_tsv(
    handle: TextIO,
    *,
    catalog: SignatureCatalog,
    matrix: ResultMatrix,
    sample_names: Sequence[str],
) -> int:
    """Write the count matrix as TSV, one row per canonical signature.

    Rows follow ``catalog.enumerate()`` order; returns the number of data rows.
    """
    if len(sample_names) != matrix.n_samples:
        raise ValueError(
            f"Got {len(sample_names)} sample names for a matrix with {matrix.n_samples} samples"
        )

    handle.write("\t".join(["Variant", *sample_names]) + "\n")
    n_rows = 0
    for signature, vidx in catalog.enumerate():
        counts = [str(matrix.get(vidx, s)) for s in range(matrix.n_samples)]
        handle.write("\t".join([str(signature), *counts]) + "\n")
        n_rows += 1
    return n_rows
