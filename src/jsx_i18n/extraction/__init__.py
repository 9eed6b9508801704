"""
Extraction of translatable text and rewriting of component sources.

This package contains:
- Key generation from text
- User exclusion rules
- The source scanner and the source transformer, which share one
  qualification routine
"""

from .exclusions import ExclusionPolicy, ExclusionRule
from .keys import generate_key, qualify_key
from .scanner import CandidateEntry, Scanner, ScanResult, find_source_files
from .syntax import SourceTree
from .transformer import Transformer, TransformResult, TransformRunResult

__all__ = [
    "CandidateEntry",
    "ExclusionPolicy",
    "ExclusionRule",
    "ScanResult",
    "Scanner",
    "SourceTree",
    "TransformResult",
    "TransformRunResult",
    "Transformer",
    "find_source_files",
    "generate_key",
    "qualify_key",
]
