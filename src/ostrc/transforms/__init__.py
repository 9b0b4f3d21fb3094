"""Deterministic OSTRC response transforms.

Re-exports key transform functions for convenient imports:
    from ostrc.transforms import normalize_codes, classify_problem
    from ostrc.transforms import classify_substantial, severity_score
    from ostrc.transforms import case_timeloss
"""

from ostrc.transforms.coding import classify_problem, normalize_codes
from ostrc.transforms.severity import severity_score
from ostrc.transforms.substantial import classify_substantial
from ostrc.transforms.timeloss import case_timeloss

__all__ = [
    # coding
    "normalize_codes",
    "classify_problem",
    # substantial
    "classify_substantial",
    # severity
    "severity_score",
    # time-loss
    "case_timeloss",
]
