"""
Works Rules - YAML configuration layer

Statutory percentages and per-document page capacities live in
rules/works_rules.yaml. The computation core never reads this file;
callers (CLI, renderers) load the rules and pass values in.
"""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from . import RULES_DIR
from .billing.deductions import (
    DEFAULT_BILL_CGST_PERCENT,
    DEFAULT_BILL_LABOUR_CESS_PERCENT,
    DEFAULT_BILL_SGST_PERCENT,
    SECURITY_DEPOSIT_CHOICES,
)
from .estimate.quantities import DEFAULT_GST_PERCENT, DEFAULT_LWC_PERCENT

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = RULES_DIR / "works_rules.yaml"

DEFAULT_RULES: Dict[str, Any] = {
    "estimate": {
        "gst_percent": DEFAULT_GST_PERCENT,
        "lwc_percent": DEFAULT_LWC_PERCENT,
    },
    "bill_abstract": {
        "cgst_percent": DEFAULT_BILL_CGST_PERCENT,
        "sgst_percent": DEFAULT_BILL_SGST_PERCENT,
        "labour_cess_percent": DEFAULT_BILL_LABOUR_CESS_PERCENT,
    },
    "deductions": {
        "defaults": {
            "income_tax": 1.0,
            "gst_tds": 0.0,
            "labour_cess": 1.0,
            "security_deposit": 10.0,
        },
        "security_deposit_choices": list(SECURITY_DEPOSIT_CHOICES),
    },
    "pagination": {
        "abstract_items_per_page": 10,
        "measurement_items_per_page": 12,
        "estimate_items_per_page": 12,
    },
    "office": {
        "agency": "Gram Panchayat",
        "financial_year": "2025-2026",
    },
}


@dataclass
class WorksRules:
    """Resolved rules, defaults merged with the YAML file."""
    gst_percent: float = DEFAULT_GST_PERCENT
    lwc_percent: float = DEFAULT_LWC_PERCENT
    cgst_percent: float = DEFAULT_BILL_CGST_PERCENT
    sgst_percent: float = DEFAULT_BILL_SGST_PERCENT
    bill_labour_cess_percent: float = DEFAULT_BILL_LABOUR_CESS_PERCENT
    deduction_defaults: Dict[str, float] = field(default_factory=dict)
    security_deposit_choices: List[float] = field(default_factory=list)
    abstract_items_per_page: int = 10
    measurement_items_per_page: int = 12
    estimate_items_per_page: int = 12
    agency: str = "Gram Panchayat"
    financial_year: str = ""
    source_path: Optional[Path] = None

    def is_usual_security_deposit(self, percentage: float) -> bool:
        return float(percentage) in self.security_deposit_choices

    @classmethod
    def from_dict(cls, config: Dict[str, Any], source_path: Optional[Path] = None) -> "WorksRules":
        estimate = config.get("estimate", {})
        abstract = config.get("bill_abstract", {})
        deductions = config.get("deductions", {})
        pagination = config.get("pagination", {})
        office = config.get("office", {})

        return cls(
            gst_percent=float(estimate.get("gst_percent", DEFAULT_GST_PERCENT)),
            lwc_percent=float(estimate.get("lwc_percent", DEFAULT_LWC_PERCENT)),
            cgst_percent=float(abstract.get("cgst_percent", DEFAULT_BILL_CGST_PERCENT)),
            sgst_percent=float(abstract.get("sgst_percent", DEFAULT_BILL_SGST_PERCENT)),
            bill_labour_cess_percent=float(abstract.get("labour_cess_percent", DEFAULT_BILL_LABOUR_CESS_PERCENT)),
            deduction_defaults={
                k: float(v) for k, v in deductions.get("defaults", {}).items()
            },
            security_deposit_choices=[
                float(v) for v in deductions.get("security_deposit_choices", SECURITY_DEPOSIT_CHOICES)
            ],
            abstract_items_per_page=int(pagination.get("abstract_items_per_page", 10)),
            measurement_items_per_page=int(pagination.get("measurement_items_per_page", 12)),
            estimate_items_per_page=int(pagination.get("estimate_items_per_page", 12)),
            agency=str(office.get("agency", "Gram Panchayat")),
            financial_year=str(office.get("financial_year", "")),
            source_path=source_path,
        )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_rules(path: Optional[Path] = None) -> WorksRules:
    """
    Load works rules from YAML.

    Args:
        path: Rules file; defaults to rules/works_rules.yaml

    Returns:
        WorksRules with file values merged over the built-in defaults
    """
    rules_path = Path(path) if path else DEFAULT_RULES_PATH

    try:
        with open(rules_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Rules file not found: {rules_path} - using defaults")
        return WorksRules.from_dict(DEFAULT_RULES)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load rules {rules_path}: {e} - using defaults")
        return WorksRules.from_dict(DEFAULT_RULES)

    if not isinstance(loaded, dict):
        logger.warning(f"Rules file {rules_path} is not a mapping - using defaults")
        return WorksRules.from_dict(DEFAULT_RULES)

    try:
        rules = WorksRules.from_dict(_deep_merge(DEFAULT_RULES, loaded), source_path=rules_path)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Invalid value in rules {rules_path}: {e} - using defaults")
        return WorksRules.from_dict(DEFAULT_RULES)

    logger.debug(f"Loaded rules from {rules_path}")
    return rules
