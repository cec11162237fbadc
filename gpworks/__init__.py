"""
GP Works - Estimate, Measurement Book & Bill Deduction Engine
Civil-works billing core for Gram Panchayat development works.
"""

__version__ = "1.0.0"
__author__ = "GP Works"

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
RULES_DIR = PROJECT_ROOT / "rules"
OUTPUT_DIR = PROJECT_ROOT / "out"
