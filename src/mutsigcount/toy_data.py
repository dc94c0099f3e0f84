from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pysam

from .utils import ensure_outdir, write_json

TOY_CONTIG = "1"
TOY_SAMPLES = ("S1", "S2")
TOY_REFERENCE = "TACAGTTNACCGATTACGAT"

# (pos0, alleles, S1 GT, S2 GT). Comments give the outcome with --bases-window 1.
TOY_RECORDS: List[Tuple[int, Tuple[str, ...], Tuple[Optional[int], ...], Tuple[Optional[int], ...]]] = [
    (2, ("C", "T"), (0, 0), (0, 1)),  # ACA>T
    (4, ("G", "A"), (1, 1), (0, 1)),  # AGT G>A -> ACT>T
    (6, ("T", "C"), (0, 1), (0, 1)),  # window TTN: ignored
    (9, ("CC", "C"), (0, 1), (0, 0)),  # deletion: ignored
    (11, ("A", "T"), (0, 1), (0, 0)),  # reference is G: issue
    (13, ("T", "C", "TT"), (0, 1), (0, 2)),  # insertion allele: ignored
    (15, ("A", "G"), (0, 1), (0, 1)),  # TAC A>G -> GTA>C, homogeneous
    (16, ("C", "A", "T"), (1, 2), (None, None)),  # ACG>A and ACG>T
]


def _write_fasta(path: Path, contig: str, seq: str) -> None:
    lines = [f">{contig}"]
    for i in range(0, len(seq), 60):
        lines.append(seq[i : i + 60])
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def make_toy_data(*, outdir: str | Path) -> Dict[str, str]:
    """Create a tiny reference and two-sample VCF covering every record outcome.

    The outputs include:
    - toy_ref.fa (+ .fai)
    - toy.vcf.gz (+ .tbi)

    Returns
    -------
    dict
        Paths to the generated files.
    """
    outdir_p = ensure_outdir(outdir)

    ref_fa = outdir_p / "toy_ref.fa"
    _write_fasta(ref_fa, TOY_CONTIG, TOY_REFERENCE)
    pysam.faidx(str(ref_fa))

    header = pysam.VariantHeader()
    header.add_meta("fileformat", "VCFv4.2")
    for name in TOY_SAMPLES:
        header.add_sample(name)
    header.contigs.add(TOY_CONTIG, length=len(TOY_REFERENCE))
    header.formats.add("GT", number=1, type="String", description="Genotype")

    vcf_path = outdir_p / "toy.vcf"
    with pysam.VariantFile(str(vcf_path), "w", header=header) as vcf:
        for pos0, alleles, gt1, gt2 in TOY_RECORDS:
            rec = vcf.new_record(
                contig=TOY_CONTIG,
                start=pos0,
                stop=pos0 + len(alleles[0]),
                alleles=alleles,
                filter="PASS",
            )
            rec.samples[TOY_SAMPLES[0]]["GT"] = gt1
            rec.samples[TOY_SAMPLES[1]]["GT"] = gt2
            vcf.write(rec)

    vcf_gz = outdir_p / "toy.vcf.gz"
    pysam.tabix_compress(str(vcf_path), str(vcf_gz), force=True)
    pysam.tabix_index(str(vcf_gz), preset="vcf", force=True)

    summary = {
        "ref_fa": str(ref_fa),
        "vcf": str(vcf_gz),
        "outdir": str(outdir_p),
    }
    write_json(outdir_p / "toy_summary.json", summary)
    return summary
