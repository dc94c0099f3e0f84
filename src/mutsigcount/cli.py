from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .counter import RecordError, count_signatures
from .plotting import plot_spectrum
from .reference import ReferenceWindow
from .report import write_counts_tsv
from .signatures import SignatureCatalog
from .utils import ensure_outdir, open_textmaybe_gzip, write_json
from .validation import check_fasta_index, check_window
from .variants import header_contigs, iter_variant_records, open_vcf, resolve_samples


def _setup_logging(verbosity: int, *, logfile: Optional[Path] = None) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    log_fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(level=level, format=log_fmt, stream=sys.stderr)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(logfile)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(log_fmt))
        logging.getLogger().addHandler(fh)


def _path_exists(p: str) -> str:
    if not Path(p).exists():
        raise argparse.ArgumentTypeError(f"Path does not exist: {p}")
    return p


def _window_size(v: str) -> int:
    try:
        return check_window(v)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _handle_error(err: Exception, *, log_path: Optional[Path] = None) -> int:
    if isinstance(err, RecordError):
        msg = str(err)
    else:
        msg = f"{err.__class__.__name__}: {err}"

    sys.stderr.write(msg + "\n")
    if log_path is not None:
        sys.stderr.write(f"See log: {log_path}\n")
    return 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mutsigcount",
        description=(
            "mutsigcount: count single-nucleotide substitutions per sample, classified by their "
            "strand-canonical sequence context (e.g. the 96 trinucleotide classes for --bases-window 1). "
            "Writes a signature x sample TSV to stdout."
        ),
    )
    p.add_argument("--version", action="version", version=f"mutsigcount {__version__}")

    p.add_argument("vcf", metavar="VCF", type=_path_exists, help="Input VCF/BCF (.vcf/.vcf.gz/.bcf).")
    p.add_argument(
        "reference",
        metavar="REFERENCE",
        type=_path_exists,
        help="Reference FASTA (must be indexed with samtools faidx).",
    )
    p.add_argument(
        "-s",
        "--samples",
        action="append",
        default=None,
        metavar="SAMPLE",
        help="Include this sample in the analysis (default: all); can be given multiple times.",
    )
    p.add_argument(
        "-i",
        "--ignore-homogeneous",
        action="store_true",
        help="Ignore sites where all samples have the same genotype (needs >= 2 samples).",
    )
    p.add_argument(
        "-w",
        "--bases-window",
        type=_window_size,
        default=0,
        metavar="BASES",
        help="Number of bases to consider up- and downstream of the mutation (default: 0).",
    )

    # Outputs
    p.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the TSV to this path instead of stdout (.gz is compressed).",
    )
    p.add_argument("--stats-json", default=None, help="Write record counters as JSON.")
    p.add_argument("--plot", default=None, help="Write a per-sample spectrum bar chart (PNG).")
    p.add_argument("--progress", action="store_true", help="Show a progress bar on stderr.")

    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v/-vv).")
    p.add_argument("--log-file", default=None, help="Also write log messages to this file.")
    return p


def cmd_count(args: argparse.Namespace) -> int:
    log_path = Path(args.log_file).expanduser().resolve() if args.log_file else None
    _setup_logging(args.verbose, logfile=log_path)

    logger = logging.getLogger("mutsigcount")
    logger.info("Started mutsigcount %s", __version__)

    try:
        window = int(args.bases_window)
        check_fasta_index(args.reference)
        logger.info("Using reference from %s with window size of %d", args.reference, window)

        with open_vcf(args.vcf) as vcf, ReferenceWindow(args.reference, window) as reference:
            sample_names = list(vcf.header.samples)
            sample_indices = resolve_samples(sample_names, args.samples)
            selected = [sample_names[i] for i in sample_indices]
            logger.debug("Processing %d samples (%s) from: %s", len(selected), sample_indices, sample_names)

            if args.ignore_homogeneous and len(sample_indices) < 2:
                raise ValueError(
                    "Found only one sample but were told to ignore homogeneous sites - this is not possible"
                )

            catalog = SignatureCatalog(window)
            logger.debug("Found a total of %d signature variants", catalog.size())

            matrix, stats = count_signatures(
                iter_variant_records(vcf),
                contigs=header_contigs(vcf.header),
                reference=reference,
                catalog=catalog,
                sample_indices=sample_indices,
                ignore_homogeneous=bool(args.ignore_homogeneous),
                log=logging.getLogger("mutsigcount.counter"),
                progress=bool(args.progress),
            )

        if args.output is not None:
            out_path = Path(args.output).expanduser().resolve()
            ensure_outdir(out_path.parent)
            with open_textmaybe_gzip(out_path, "wt") as fh:
                write_counts_tsv(fh, catalog=catalog, matrix=matrix, sample_names=selected)
            logger.info("Counts written: %s", out_path)
        else:
            write_counts_tsv(sys.stdout, catalog=catalog, matrix=matrix, sample_names=selected)
            sys.stdout.flush()

        if args.stats_json is not None:
            write_json(
                args.stats_json,
                {
                    "version": __version__,
                    "vcf": str(args.vcf),
                    "reference": str(args.reference),
                    "window": window,
                    "samples": selected,
                    "ignore_homogeneous": bool(args.ignore_homogeneous),
                    "signatures": catalog.size(),
                    "counts": stats,
                },
            )

        if args.plot is not None:
            plot_spectrum(catalog=catalog, matrix=matrix, sample_names=selected, out_png=args.plot)
        return 0
    except Exception as e:
        return _handle_error(e, log_path=log_path)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return cmd_count(args)


if __name__ == "__main__":
    raise SystemExit(main())
