from __future__ import annotations

from typing import Tuple

import numpy as np


class ResultMatrix:
    """Dense signature x sample count matrix."""

    def __init__(self, n_variants: int, n_samples: int) -> None:
        if n_variants < 0 or n_samples < 0:
            raise ValueError("Matrix dimensions must be >= 0")
        self._counts = np.zeros((int(n_variants), int(n_samples)), dtype=np.uint32)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._counts.shape  # type: ignore[return-value]

    @property
    def n_variants(self) -> int:
        return self._counts.shape[0]

    @property
    def n_samples(self) -> int:
        return self._counts.shape[1]

    def _check(self, vidx: int, sidx: int) -> None:
        # numpy would wrap negative indices
        if not (0 <= vidx < self.n_variants and 0 <= sidx < self.n_samples):
            raise IndexError(
                f"Cell ({vidx}, {sidx}) outside matrix of shape {self.shape}"
            )

    def increment(self, vidx: int, sidx: int) -> None:
        """Add one to the count of variant ``vidx`` in sample ``sidx``."""
        self._check(vidx, sidx)
        self._counts[vidx, sidx] += 1

    def get(self, vidx: int, sidx: int) -> int:
        self._check(vidx, sidx)
        return int(self._counts[vidx, sidx])

    def merge(self, other: "ResultMatrix") -> None:
        """Add another matrix cell-wise, e.g. counts from a separate shard of records."""
        if other.shape != self.shape:
            raise ValueError(f"Can not merge matrix of shape {other.shape} into {self.shape}")
        self._counts += other._counts

    def total(self) -> int:
        return int(self._counts.sum())

    def to_array(self) -> np.ndarray:
        return self._counts.copy()
