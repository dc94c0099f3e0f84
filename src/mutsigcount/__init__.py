"""mutsigcount: per-sample counts of sequence-context SNV signatures.

Public API is intentionally small; most users should use the CLI:

    mutsigcount variants.vcf.gz reference.fa --bases-window 1 > counts.tsv

"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
