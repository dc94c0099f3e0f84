from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from tqdm import tqdm

from .genotype import Genotype, is_varying
from .models import Outcome, RecordStatus, VariantRecord
from .result import ResultMatrix
from .signatures import BASES, Signature, SignatureCatalog

logger = logging.getLogger(__name__)

_ACGT = frozenset(BASES)


class Reference(Protocol):
    window: int

    def fetch(self, contig: str, pos0: int) -> str:
        ...


class RecordError(RuntimeError):
    """Raised when a record can not be processed and the run must stop."""

    def __init__(self, message: str, *, contig: Optional[str] = None, pos0: Optional[int] = None) -> None:
        super().__init__(message)
        self.contig = contig
        self.pos0 = pos0


def classify_record(
    record: VariantRecord,
    *,
    contigs: Mapping[int, str],
    reference: Reference,
    catalog: SignatureCatalog,
) -> RecordStatus:
    """Map the alternative alleles of a record onto catalog signatures.

    Returns one RecordStatus: OK with a signature index per alternative allele
    (in allele order), IGNORE for records that are not countable SNVs, ISSUE when
    the reference disagrees with the record, and ERROR for conditions that must
    abort the run.
    """
    contig = contigs.get(record.contig_id)
    if contig is None:
        return RecordStatus.error(
            f"Can not find contig name for contig id {record.contig_id} "
            "(is it declared in the VCF header?)"
        )
    where = f"{contig}:{record.pos0 + 1}"

    if not record.alleles:
        return RecordStatus.ignore(f"Ignoring record without alleles at position {where}")
    ref_allele = record.alleles[0].upper()
    if len(ref_allele) != 1:
        return RecordStatus.ignore(f"Ignoring non-SNV variant at position {where}")

    try:
        codon = reference.fetch(contig, record.pos0)
    except Exception as e:
        return RecordStatus.error(f"Can not fetch codon at position {contig}:{record.pos0}: {e}")

    if any(b not in _ACGT for b in codon):
        return RecordStatus.ignore(
            f"Ignoring codon with non-standard nucleotide at position {where}: {codon}"
        )

    center = codon[reference.window]
    if center != ref_allele:
        return RecordStatus.issue(
            f"Loaded codon '{codon}' at {where} does not match expected reference allele {ref_allele}"
        )

    signatures: List[Signature] = []
    for allele in record.alleles[1:]:
        alt = allele.upper()
        if len(alt) != 1:
            return RecordStatus.ignore(f"Ignoring non-SNV variant at position {where}")
        if alt not in _ACGT:
            return RecordStatus.ignore(f"Ignoring symbolic allele '{allele}' at position {where}")
        signatures.append(Signature(codon, center, alt))

    if not signatures:
        return RecordStatus.ignore(f"Ignoring no-alternative variant at position {where}")

    indices: List[int] = []
    for sig in signatures:
        idx = catalog.index_of(sig)
        if idx is None:
            return RecordStatus.error(f"Signature {sig!r} at {where} is not in the catalog")
        indices.append(idx)

    return RecordStatus.ok(tuple(signatures), tuple(indices))


def count_signatures(
    records: Iterable[VariantRecord],
    *,
    contigs: Mapping[int, str],
    reference: Reference,
    catalog: SignatureCatalog,
    sample_indices: Sequence[int],
    ignore_homogeneous: bool = False,
    log: logging.Logger = logger,
    progress: bool = False,
) -> Tuple[ResultMatrix, Dict[str, int]]:
    """Single pass over the records, accumulating signature counts per sample.

    Parameters
    ----------
    records:
        Variant records in file order.
    contigs:
        VCF contig id -> contig name.
    reference:
        Window fetcher; its window must match the catalog's.
    catalog:
        Signature catalog providing the matrix rows.
    sample_indices:
        Positions in ``record.calls`` of the samples to count, in output order.
    ignore_homogeneous:
        Skip records where all selected samples share the same genotype.
        Requires at least two samples.
    log:
        Receives skip (debug) and data issue (warning) messages.

    Returns
    -------
    matrix:
        ResultMatrix with one row per catalog class and one column per selected sample.
    stats:
        Counters about records seen, counted and skipped.
    """
    n_samples = len(sample_indices)
    if ignore_homogeneous and n_samples < 2:
        raise ValueError(
            f"Found only {n_samples} sample(s) but were told to ignore homogeneous sites; "
            "this requires at least two samples"
        )
    if reference.window != catalog.window:
        raise ValueError(
            f"Reference window ({reference.window}) does not match catalog window ({catalog.window})"
        )

    matrix = ResultMatrix(catalog.size(), n_samples)
    stats: Dict[str, int] = {
        "records_total": 0,
        "records_counted": 0,
        "records_ignored": 0,
        "records_issue": 0,
        "records_homogeneous": 0,
        "alleles_counted": 0,
    }

    it: Iterable[VariantRecord] = records
    if progress:
        it = tqdm(it, unit="record", desc="Counting signatures")

    for record in it:
        stats["records_total"] += 1

        status = classify_record(record, contigs=contigs, reference=reference, catalog=catalog)
        if status.outcome is Outcome.ERROR:
            raise RecordError(
                status.message,
                contig=contigs.get(record.contig_id),
                pos0=record.pos0,
            )
        if status.outcome is Outcome.IGNORE:
            log.debug("%s", status.message)
            stats["records_ignored"] += 1
            continue
        if status.outcome is Outcome.ISSUE:
            log.warning("%s", status.message)
            stats["records_issue"] += 1
            continue

        sig_indices = status.indices
        log.debug("Found signatures %s -> %s", status.signatures, sig_indices)

        genotypes = [Genotype.from_calls(record.calls[i]) for i in sample_indices]

        if ignore_homogeneous and not is_varying(genotypes):
            stats["records_homogeneous"] += 1
            continue

        for sidx, gt in enumerate(genotypes):
            for allele in gt.iter():
                if allele > 0:
                    if allele > len(sig_indices):
                        raise RecordError(
                            f"Genotype {gt!r} references allele {allele} but the record has "
                            f"{len(sig_indices)} alternative allele(s)",
                            contig=contigs.get(record.contig_id),
                            pos0=record.pos0,
                        )
                    matrix.increment(sig_indices[allele - 1], sidx)
                    stats["alleles_counted"] += 1
        stats["records_counted"] += 1

    log.info(
        "Processed %d records: %d counted, %d ignored, %d with reference issues, %d homogeneous",
        stats["records_total"],
        stats["records_counted"],
        stats["records_ignored"],
        stats["records_issue"],
        stats["records_homogeneous"],
    )
    return matrix, stats
