"""
Bill Deduction Engine

Modules:
- deductions: statutory deductions on a gross bill, bill abstract gross
- verification: one-way deduction verification and payment booking
- words: amounts in words (Indian numbering)
- schema: pydantic bill records
"""

from .deductions import (
    SECURITY_DEPOSIT_CHOICES,
    BillAbstractTotals,
    DeductionRates,
    DeductionResult,
    apply_deduction,
    compute_bill_gross,
)
from .verification import (
    DeductionRecord,
    DeductionStatus,
    PaymentRecord,
    VerificationOutcome,
    VoucherDetails,
    WorkRecord,
    WorkStatus,
    verify_and_record_payment,
    verify_deduction,
)
from .words import amount_in_words, rupees_in_words
from .schema import BillInfo, BillRecord, load_bill, parse_bill

__all__ = [
    "SECURITY_DEPOSIT_CHOICES",
    "BillAbstractTotals",
    "DeductionRates",
    "DeductionResult",
    "apply_deduction",
    "compute_bill_gross",
    "DeductionRecord",
    "DeductionStatus",
    "PaymentRecord",
    "VerificationOutcome",
    "VoucherDetails",
    "WorkRecord",
    "WorkStatus",
    "verify_and_record_payment",
    "verify_deduction",
    "amount_in_words",
    "rupees_in_words",
    "BillInfo",
    "BillRecord",
    "load_bill",
    "parse_bill",
]
