"""
Shared fixtures for the gpworks test suite.

Sample estimate (hand-checked):

    1. Earth work, cum @ 150, measurements 1×10×1×0.5 + 2×5×1×0.5 = 10.000 → 1500.00
    2. Brick work, two sub-items: 2 @ 10 + 3 @ 5             = 5.000   →   35.00
    3. Culvert pipes, 4 nos @ 250                           = 4.000   → 1000.00
                                                       itemwise total  2535.00
"""

import pytest

from gpworks.billing.deductions import DeductionRates, apply_deduction
from gpworks.estimate.models import (
    EstimateDocument,
    EstimateLineItem,
    Measurement,
    ProjectInfo,
    SubItem,
)


@pytest.fixture
def project_info():
    return ProjectInfo(
        project_name="Construction of CC road at Ward 4",
        project_code="GP/2025/014",
        location="Ward 4",
        prepared_by="Nirman Sahayak",
        fund="15th FC",
        date="2025-07-01",
    )


@pytest.fixture
def sample_items():
    return [
        EstimateLineItem(
            sl_no=1,
            description="Earth work in excavation",
            unit="cum",
            rate=150.0,
            measurements=[
                Measurement(description="Main trench", nos=1, length=10, breadth=1, depth=0.5),
                Measurement(description="Side trench", nos=2, length=5, breadth=1, depth=0.5),
            ],
        ),
        EstimateLineItem(
            sl_no=2,
            description="Brick work",
            unit="cum",
            rate=9999.0,
            sub_items=[
                SubItem(description="First class bricks", unit="cum", rate=10.0, quantity=2),
                SubItem(description="Picked jhama bricks", unit="cum", rate=5.0, quantity=3),
            ],
        ),
        EstimateLineItem(
            sl_no=3,
            description="Supply of hume pipes",
            unit="nos",
            rate=250.0,
            quantity=4,
        ),
    ]


@pytest.fixture
def sample_document(project_info, sample_items):
    return EstimateDocument(project=project_info, items=sample_items, contingency=100.0)


@pytest.fixture
def standard_rates():
    return DeductionRates(income_tax=1, gst_tds=2, labour_cess=1, security_deposit=10)


@pytest.fixture
def standard_deduction(standard_rates):
    """Deductions on a gross bill of 1,00,000."""
    return apply_deduction(100000, standard_rates)


@pytest.fixture
def estimate_payload():
    return {
        "project": {"project_name": "Drain at Ward 2", "project_code": 2025},
        "contingency": 50,
        "items": [
            {
                "description": "Earth work",
                "unit": "Cum",
                "rate": 100,
                "amount": 123456,
                "measurements": [{"description": "Trench", "nos": 1, "length": 10, "breadth": 1, "depth": 1}],
            },
            {
                "description": "Plastering",
                "unit": "sqm",
                "rate": 20,
                "quantity": 5,
            },
        ],
    }
