from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .signatures import Signature


@dataclass(frozen=True)
class VariantRecord:
    """One VCF record as seen by the counter.

    Coordinates are 0-based.

    Attributes
    ----------
    contig_id:
        Numeric contig id from the VCF header.
    pos0:
        0-based position of the first reference base.
    alleles:
        Reference allele followed by the alternative alleles, as written in the VCF.
    calls:
        Per-sample allele indices (``None`` for a no-call), all samples in VCF order.
    """

    contig_id: int
    pos0: int
    alleles: Tuple[str, ...]
    calls: Tuple[Tuple[Optional[int], ...], ...] = ()


class Outcome(enum.Enum):
    OK = "ok"
    IGNORE = "ignore"  # skip silently (debug log)
    ISSUE = "issue"  # skip with a warning
    ERROR = "error"  # abort the run


@dataclass(frozen=True)
class RecordStatus:
    """Classification of a single record; exactly one outcome per record."""

    outcome: Outcome
    message: str = ""
    signatures: Tuple[Signature, ...] = ()
    indices: Tuple[int, ...] = ()

    @classmethod
    def ok(cls, signatures: Tuple[Signature, ...], indices: Tuple[int, ...]) -> "RecordStatus":
        return cls(Outcome.OK, signatures=signatures, indices=indices)

    @classmethod
    def ignore(cls, message: str) -> "RecordStatus":
        return cls(Outcome.IGNORE, message=message)

    @classmethod
    def issue(cls, message: str) -> "RecordStatus":
        return cls(Outcome.ISSUE, message=message)

    @classmethod
    def error(cls, message: str) -> "RecordStatus":
        return cls(Outcome.ERROR, message=message)
