from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import pysam

from .models import VariantRecord

logger = logging.getLogger(__name__)


def open_vcf(vcf_path: str | Path) -> pysam.VariantFile:
    try:
        return pysam.VariantFile(str(vcf_path))
    except (OSError, ValueError) as e:
        raise ValueError(f"Can not open VCF file '{vcf_path}': {e}") from e


def header_contigs(header: pysam.VariantHeader) -> Dict[int, str]:
    """Map VCF header contig ids to contig names."""
    return {contig.id: name for name, contig in header.contigs.items()}


def resolve_samples(sample_names: Sequence[str], requested: Optional[Sequence[str]]) -> List[int]:
    """Return VCF sample indices for the requested names (default: all, in file order)."""
    if not requested:
        return list(range(len(sample_names)))

    lookup = {name: i for i, name in enumerate(sample_names)}
    indices: List[int] = []
    for name in requested:
        if name not in lookup:
            available = ", ".join(f"'{s}'" for s in sample_names)
            raise ValueError(f"Can not find sample '{name}' in list of: {available}")
        indices.append(lookup[name])
    return indices


def _calls(sample: pysam.libcbcf.VariantRecordSample) -> tuple:
    # allele_indices drops phasing and yields None for missing alleles
    return tuple(sample.allele_indices or ())


def iter_variant_records(vcf: pysam.VariantFile) -> Iterator[VariantRecord]:
    """Yield records in file order, reduced to what the counter needs."""
    for rec in vcf:
        yield VariantRecord(
            contig_id=int(rec.rid),
            pos0=int(rec.start),
            alleles=tuple(rec.alleles or ()),
            calls=tuple(_calls(s) for s in rec.samples.values()),
        )
