from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence, Tuple


def _sort_key(allele: Optional[int]) -> Tuple[int, int]:
    # no-calls sort before every called allele
    if allele is None:
        return (0, 0)
    return (1, allele)


class Genotype:
    """Allele indices called for one sample at one record.

    Only allele counts matter, not haplotypes, so the calls are stored sorted
    and phasing is dropped. ``0`` is the reference allele, ``k > 0`` the k-th
    alternative allele and ``None`` a no-call.
    """

    __slots__ = ("_alleles",)

    def __init__(self, calls: Iterable[Optional[int]] = ()) -> None:
        alleles = [None if c is None else int(c) for c in calls]
        self._alleles: Tuple[Optional[int], ...] = tuple(sorted(alleles, key=_sort_key))

    @classmethod
    def from_calls(cls, calls: Optional[Iterable[Optional[int]]]) -> "Genotype":
        return cls(calls or ())

    @property
    def alleles(self) -> Tuple[Optional[int], ...]:
        return self._alleles

    def iter(self) -> Iterator[int]:
        """Called allele indices in ascending order, no-calls skipped."""
        return (a for a in self._alleles if a is not None)

    def __iter__(self) -> Iterator[int]:
        return self.iter()

    def __len__(self) -> int:
        return len(self._alleles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genotype):
            return NotImplemented
        if len(self._alleles) != len(other._alleles):
            return False
        # NOTE: the first no-call makes the whole pair equal, even when later
        # positions differ. Probably meant as a per-position wildcard; changing
        # it changes --ignore-homogeneous output.
        for mine, theirs in zip(self._alleles, other._alleles):
            if mine is None or theirs is None:
                return True
            if mine != theirs:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self._alleles:
            return "Genotype()"
        return "Genotype(" + "/".join("-" if a is None else str(a) for a in self._alleles) + ")"


def is_varying(genotypes: Sequence[Genotype]) -> bool:
    """True if any sample's genotype differs from the first sample's."""
    if len(genotypes) < 2:
        return False
    first = genotypes[0]
    return any(first != gt for gt in genotypes[1:])
