"""Signature catalog: sequence contexts collapsed by strand symmetry.

A substitution observed on one strand is the same event as the complementary
substitution on the other strand. The catalog therefore keys every possible
``context + alternative`` combination but assigns indices only to the
pyrimidine-referenced (C/T centered) half; purine-referenced keys resolve to
the index of their reverse complement.

For a window of ``w`` bases up- and downstream there are
``6 * 4 ** (2 * w)`` canonical classes (96 for the classic trinucleotide
catalog with ``w = 1``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

BASES = ("A", "C", "G", "T")
FORWARD_BASES = ("C", "T")
REVERSE_BASES = ("A", "G")

_COMPLEMENT = {"A": "T", "C": "G", "G": "C", "T": "A"}


def complement(base: str) -> str:
    try:
        return _COMPLEMENT[base]
    except KeyError:
        raise ValueError(f"Can not complement '{base}'") from None


def reverse_complement(seq: str) -> str:
    """Reverse the sequence and complement each base (A<->T, C<->G)."""
    return "".join(complement(b) for b in reversed(seq))


@dataclass(frozen=True, order=True)
class Signature:
    """A single-base substitution within its sequence context.

    Attributes
    ----------
    context:
        The ``2w+1`` bases centered on the substituted position.
    reference:
        Reference base; always the center of ``context``. Not part of equality,
        hashing or ordering.
    alternative:
        Substituted base.
    """

    context: str
    reference: str = field(compare=False)
    alternative: str

    @property
    def is_forward(self) -> bool:
        return self.reference in FORWARD_BASES

    def __str__(self) -> str:
        return f"{self.context}>{self.alternative}"

    def __repr__(self) -> str:
        return f"Signature({self.context}:{self.reference}>{self.alternative})"


def _extend(codons: List[str], symbols: Tuple[str, ...]) -> List[str]:
    return [s + c for c in symbols for s in codons]


def build_codons(forward: bool, prior: int, after: int) -> List[str]:
    """Enumerate context strings with a pyrimidine (forward) or purine center.

    ``prior`` and ``after`` are the number of free flank positions before and
    after the center. Returns ``2 * 4 ** (prior + after)`` strings.
    """
    if prior < 0 or after < 0:
        raise ValueError("Flank lengths must be >= 0")

    codons = [""]
    for _ in range(prior):
        codons = _extend(codons, BASES)
    codons = _extend(codons, FORWARD_BASES if forward else REVERSE_BASES)
    for _ in range(after):
        codons = _extend(codons, BASES)
    return codons


def catalog_size(window: int) -> int:
    return 6 * 4 ** (2 * window)


class SignatureCatalog:
    """Queryable set of canonical signatures for a fixed window size.

    Built once; read-only afterwards and safe to share.
    """

    def __init__(self, window: int) -> None:
        if window < 0:
            raise ValueError(f"Window size must be >= 0, got {window}")
        self.window = int(window)
        self._index: Dict[Signature, int] = {}
        self._n = 0
        self._build()
        self._forward: List[Tuple[Signature, int]] = sorted(
            ((s, i) for s, i in self._index.items() if s.is_forward),
            key=lambda item: item[0],
        )
        logger.debug(
            "Built signature catalog: window=%d, %d keys, %d classes",
            self.window,
            len(self._index),
            self._n,
        )

    def _build(self) -> None:
        w = self.window

        for codon in build_codons(True, w, w):
            center = codon[w]
            for alt in BASES:
                if alt == center:
                    continue
                self._index[Signature(codon, center, alt)] = self._n
                self._n += 1

        for codon in build_codons(False, w, w):
            center = codon[w]
            rc_codon = reverse_complement(codon)
            for alt in BASES:
                if alt == center:
                    continue
                rc_sig = Signature(rc_codon, complement(center), complement(alt))
                idx = self._index.get(rc_sig)
                if idx is None:
                    raise RuntimeError(
                        f"Reverse complement {rc_sig!r} of {codon}>{alt} has no forward entry"
                    )
                self._index[Signature(codon, center, alt)] = idx

    def index_of(self, signature: Signature) -> Optional[int]:
        return self._index.get(signature)

    def size(self) -> int:
        """Number of distinct canonical classes."""
        return self._n

    def __len__(self) -> int:
        return self._n

    def __contains__(self, signature: object) -> bool:
        return signature in self._index

    def enumerate(self) -> List[Tuple[Signature, int]]:
        """Forward signatures with their index, sorted by (context, alternative)."""
        return list(self._forward)
