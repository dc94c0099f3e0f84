import logging

import pytest

from mutsigcount.counter import RecordError, classify_record, count_signatures
from mutsigcount.models import Outcome, VariantRecord
from mutsigcount.signatures import Signature, SignatureCatalog


class FakeReference:
    def __init__(self, seqs, window):
        self.seqs = seqs
        self.window = window
        self.fetched = []

    def fetch(self, contig, pos0):
        self.fetched.append((contig, pos0))
        seq = self.seqs[contig]
        start, end = pos0 - self.window, pos0 + self.window + 1
        if start < 0 or end > len(seq):
            raise ValueError("window out of bounds")
        return seq[start:end].upper()


CONTIGS = {0: "1"}


@pytest.fixture(scope="module")
def catalog():
    return SignatureCatalog(1)


def _rec(pos0, alleles, calls=((0, 0), (0, 1))):
    return VariantRecord(contig_id=0, pos0=pos0, alleles=tuple(alleles), calls=tuple(calls))


def _count(records, catalog, seq="TACAGT", **kwargs):
    ref = FakeReference({"1": seq}, catalog.window)
    kwargs.setdefault("sample_indices", [0, 1])
    return count_signatures(records, contigs=CONTIGS, reference=ref, catalog=catalog, **kwargs)


def test_single_snv_end_to_end(catalog):
    matrix, stats = _count([_rec(2, ["C", "T"])], catalog)
    idx = catalog.index_of(Signature("ACA", "C", "T"))
    assert matrix.get(idx, 0) == 0
    assert matrix.get(idx, 1) == 1
    assert matrix.total() == 1
    assert stats["records_counted"] == 1


def test_purine_reference_counts_into_reverse_complement(catalog):
    # window AGT, G>A is C>T on the other strand: ACT>T
    matrix, _ = _count([_rec(3, ["G", "A"], calls=((1, 1), (0, 0)))], catalog, seq="TAAGTC")
    idx = catalog.index_of(Signature("ACT", "C", "T"))
    assert matrix.get(idx, 0) == 2
    assert matrix.total() == 2


def test_ignore_homogeneous_skips_identical_genotypes(catalog):
    records = [_rec(2, ["C", "T"], calls=((0, 1), (0, 1)))]
    matrix, stats = _count(records, catalog, ignore_homogeneous=True)
    assert matrix.total() == 0
    assert stats["records_homogeneous"] == 1

    matrix, _ = _count(records, catalog, ignore_homogeneous=False)
    assert matrix.total() == 2


def test_ignore_homogeneous_requires_two_samples(catalog):
    with pytest.raises(ValueError):
        _count([], catalog, sample_indices=[0], ignore_homogeneous=True)


def test_sample_selection_reorders_columns(catalog):
    matrix, _ = _count([_rec(2, ["C", "T"])], catalog, sample_indices=[1, 0])
    idx = catalog.index_of(Signature("ACA", "C", "T"))
    assert matrix.get(idx, 0) == 1
    assert matrix.get(idx, 1) == 0


def test_multiallelic_counts_each_alternative(catalog):
    record = _rec(2, ["C", "A", "T"], calls=((1, 2), (2, 2)))
    matrix, _ = _count([record], catalog)
    a = catalog.index_of(Signature("ACA", "C", "A"))
    t = catalog.index_of(Signature("ACA", "C", "T"))
    assert (matrix.get(a, 0), matrix.get(t, 0)) == (1, 1)
    assert (matrix.get(a, 1), matrix.get(t, 1)) == (0, 2)


def test_no_calls_contribute_nothing(catalog):
    matrix, _ = _count([_rec(2, ["C", "T"], calls=((None, None), (None, 1)))], catalog)
    assert matrix.total() == 1


def test_multibase_reference_is_ignored_without_fetch(catalog):
    ref = FakeReference({"1": "TACAGT"}, 1)
    status = classify_record(_rec(2, ["AT", "A"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.IGNORE
    assert ref.fetched == []


def test_non_acgt_window_is_ignored(catalog):
    ref = FakeReference({"1": "TANAGT"}, 1)
    status = classify_record(_rec(3, ["A", "G"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.IGNORE
    assert "non-standard" in status.message


def test_multibase_alternative_discards_whole_record(catalog):
    ref = FakeReference({"1": "TACAGT"}, 1)
    status = classify_record(
        _rec(2, ["C", "T", "CA"]), contigs=CONTIGS, reference=ref, catalog=catalog
    )
    assert status.outcome is Outcome.IGNORE
    assert status.indices == ()


def test_no_alternative_is_ignored(catalog):
    ref = FakeReference({"1": "TACAGT"}, 1)
    status = classify_record(_rec(2, ["C"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.IGNORE


def test_symbolic_alternative_is_ignored(catalog):
    ref = FakeReference({"1": "TACAGT"}, 1)
    status = classify_record(_rec(2, ["C", "*"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.IGNORE


def test_reference_mismatch_is_an_issue(catalog, caplog):
    records = [_rec(2, ["G", "T"]), _rec(2, ["C", "T"])]
    log = logging.getLogger("test.counter")
    with caplog.at_level(logging.WARNING, logger="test.counter"):
        matrix, stats = _count(records, catalog, log=log)
    assert stats["records_issue"] == 1
    assert stats["records_counted"] == 1
    assert matrix.total() == 1
    assert any("does not match" in r.getMessage() for r in caplog.records)


def test_lowercase_alleles_are_normalized(catalog):
    ref = FakeReference({"1": "tacagt"}, 1)
    status = classify_record(_rec(2, ["c", "t"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.OK
    assert status.signatures == (Signature("ACA", "C", "T"),)


def test_unknown_contig_is_fatal(catalog):
    record = VariantRecord(contig_id=7, pos0=2, alleles=("C", "T"), calls=((0, 1), (0, 1)))
    with pytest.raises(RecordError):
        _count([record], catalog)


def test_window_out_of_bounds_is_fatal(catalog):
    with pytest.raises(RecordError) as exc:
        _count([_rec(0, ["T", "C"])], catalog)
    assert exc.value.contig == "1"
    assert exc.value.pos0 == 0


def test_alternative_equal_to_reference_is_fatal(catalog):
    ref = FakeReference({"1": "TACAGT"}, 1)
    status = classify_record(_rec(2, ["C", "C"]), contigs=CONTIGS, reference=ref, catalog=catalog)
    assert status.outcome is Outcome.ERROR


def test_genotype_allele_beyond_alternatives_is_fatal(catalog):
    with pytest.raises(RecordError):
        _count([_rec(2, ["C", "T"], calls=((0, 2), (0, 0)))], catalog)


def test_window_mismatch_rejected(catalog):
    ref = FakeReference({"1": "TACAGT"}, 0)
    with pytest.raises(ValueError):
        count_signatures([], contigs=CONTIGS, reference=ref, catalog=catalog, sample_indices=[0])
