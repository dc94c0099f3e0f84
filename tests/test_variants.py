from pathlib import Path

import pytest

from mutsigcount.toy_data import TOY_RECORDS, make_toy_data
from mutsigcount.variants import header_contigs, iter_variant_records, open_vcf, resolve_samples


def test_resolve_samples() -> None:
    names = ["A", "B", "C"]
    assert resolve_samples(names, None) == [0, 1, 2]
    assert resolve_samples(names, []) == [0, 1, 2]
    assert resolve_samples(names, ["C", "A"]) == [2, 0]
    with pytest.raises(ValueError, match="Can not find sample 'D'"):
        resolve_samples(names, ["D"])


def test_iter_variant_records(tmp_path: Path) -> None:
    toy = make_toy_data(outdir=tmp_path / "toy")
    with open_vcf(toy["vcf"]) as vcf:
        assert list(vcf.header.samples) == ["S1", "S2"]
        contigs = header_contigs(vcf.header)
        records = list(iter_variant_records(vcf))

    assert contigs == {0: "1"}
    assert len(records) == len(TOY_RECORDS)

    first = records[0]
    assert first.contig_id == 0
    assert first.pos0 == 2
    assert first.alleles == ("C", "T")
    assert first.calls == ((0, 0), (0, 1))

    last = records[-1]
    assert last.alleles == ("C", "A", "T")
    assert last.calls == ((1, 2), (None, None))


def test_open_vcf_failure(tmp_path: Path) -> None:
    bad = tmp_path / "bad.vcf"
    bad.write_text("not a vcf\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Can not open VCF file"):
        open_vcf(bad)
