"""File loading utilities.

Key modules:
    - suite: Eval suite YAML loading
"""

from .suite import load_suite, parse_suite

__all__ = ["load_suite", "parse_suite"]
