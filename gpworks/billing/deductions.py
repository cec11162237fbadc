"""
Bill Deduction Calculator

Statutory withholding on a gross bill:

    Less Income Tax @ x%
    Less GST TDS @ y%        (shown as CGST y/2% + SGST y/2%)
    Less Labour Welfare Cess @ z%
    Less Security Deposit @ s%
    ---------------------------------
    Total Deduction
    Net Payable = Gross - Total Deduction

Each deduction is rounded to whole rupees on its own, before the total
is taken. The GST TDS halves are not rounded again, so an odd GST TDS
amount gives two x.50 halves.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict

from ..errors import ValidationError, require_non_negative

logger = logging.getLogger(__name__)

SECURITY_DEPOSIT_CHOICES = (0.0, 5.0, 10.0)

DEFAULT_BILL_CGST_PERCENT = 9.0
DEFAULT_BILL_SGST_PERCENT = 9.0
DEFAULT_BILL_LABOUR_CESS_PERCENT = 1.0

RATE_FIELDS = ("income_tax", "gst_tds", "labour_cess", "security_deposit")


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def percent_of(amount: float, percentage: float) -> int:
    """round(amount × percentage / 100) to whole rupees, half-up."""
    exact = _to_decimal(amount) * _to_decimal(percentage) / Decimal(100)
    try:
        return int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError(f"amount out of range: {amount!r}")


def validate_percentage(value: Any, field_name: str) -> float:
    """Percentages must be numbers in [0, 100]."""
    percentage = require_non_negative(value, field_name)
    if percentage > 100:
        raise ValidationError(f"percentage must not exceed 100 (got {percentage})", field_name)
    return percentage


@dataclass(frozen=True)
class DeductionRates:
    """Deduction percentages (1.0 means 1%)."""
    income_tax: float = 0.0
    gst_tds: float = 0.0
    labour_cess: float = 0.0
    security_deposit: float = 0.0

    def __post_init__(self):
        for name in RATE_FIELDS:
            object.__setattr__(self, name, validate_percentage(getattr(self, name), name))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeductionRates":
        unknown = set(data) - set(RATE_FIELDS)
        if unknown:
            raise ValidationError(f"unknown deduction rate(s): {', '.join(sorted(unknown))}", "rates")
        return cls(**{k: data[k] for k in RATE_FIELDS if data.get(k) is not None})

    def to_dict(self) -> Dict[str, float]:
        return {
            "income_tax": self.income_tax,
            "gst_tds": self.gst_tds,
            "labour_cess": self.labour_cess,
            "security_deposit": self.security_deposit,
        }


@dataclass(frozen=True)
class DeductionResult:
    """Itemised deductions for one gross bill amount."""
    gross: float
    rates: DeductionRates
    income_tax_amount: int
    gst_tds_amount: int
    cgst_amount: float
    sgst_amount: float
    labour_cess_amount: int
    security_deposit_amount: int
    total_deduction: int
    net_payable: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gross": self.gross,
            "rates": self.rates.to_dict(),
            "income_tax_amount": self.income_tax_amount,
            "gst_tds_amount": self.gst_tds_amount,
            "cgst_amount": self.cgst_amount,
            "sgst_amount": self.sgst_amount,
            "labour_cess_amount": self.labour_cess_amount,
            "security_deposit_amount": self.security_deposit_amount,
            "total_deduction": self.total_deduction,
            "net_payable": self.net_payable,
        }


def apply_deduction(gross: float, rates: DeductionRates) -> DeductionResult:
    """
    Apply the four statutory deductions to a gross bill amount.

    Pure: same inputs, same result; no I/O.

    Args:
        gross: Gross bill amount
        rates: DeductionRates, or a dict with the same keys

    Raises:
        ValidationError: negative gross or invalid rates
    """
    gross = require_non_negative(gross, "gross")
    if not isinstance(rates, DeductionRates):
        rates = DeductionRates.from_dict(rates)

    income_tax_amount = percent_of(gross, rates.income_tax)
    gst_tds_amount = percent_of(gross, rates.gst_tds)
    labour_cess_amount = percent_of(gross, rates.labour_cess)
    security_deposit_amount = percent_of(gross, rates.security_deposit)

    total_deduction = (
        income_tax_amount
        + gst_tds_amount
        + labour_cess_amount
        + security_deposit_amount
    )
    net_payable = float(_to_decimal(gross) - Decimal(total_deduction))

    logger.debug(f"Deductions on {gross}: total={total_deduction} net={net_payable}")

    return DeductionResult(
        gross=gross,
        rates=rates,
        income_tax_amount=income_tax_amount,
        gst_tds_amount=gst_tds_amount,
        cgst_amount=gst_tds_amount / 2,
        sgst_amount=gst_tds_amount / 2,
        labour_cess_amount=labour_cess_amount,
        security_deposit_amount=security_deposit_amount,
        total_deduction=total_deduction,
        net_payable=net_payable,
    )


@dataclass(frozen=True)
class BillAbstractTotals:
    """Gross bill figure as printed on the bill abstract."""
    actual_value: float
    say_amount: int
    cgst_amount: int
    sgst_amount: int
    sub_total: int
    labour_cess_amount: int
    gross_bill_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actual_value": self.actual_value,
            "say_amount": self.say_amount,
            "cgst_amount": self.cgst_amount,
            "sgst_amount": self.sgst_amount,
            "sub_total": self.sub_total,
            "labour_cess_amount": self.labour_cess_amount,
            "gross_bill_amount": self.gross_bill_amount,
        }


def compute_bill_gross(
    actual_value: float,
    cgst_percent: float = DEFAULT_BILL_CGST_PERCENT,
    sgst_percent: float = DEFAULT_BILL_SGST_PERCENT,
    labour_cess_percent: float = DEFAULT_BILL_LABOUR_CESS_PERCENT,
) -> BillAbstractTotals:
    """
    Gross bill amount from the measured value of work done.

    say = round(actual value)
    CGST, SGST = round(say × 9%) each
    sub total = say + CGST + SGST
    labour cess = round(sub total × 1%)
    gross = sub total + labour cess
    """
    actual_value = require_non_negative(actual_value, "actual_value")
    cgst_percent = validate_percentage(cgst_percent, "cgst_percent")
    sgst_percent = validate_percentage(sgst_percent, "sgst_percent")
    labour_cess_percent = validate_percentage(labour_cess_percent, "labour_cess_percent")

    say_amount = percent_of(actual_value, 100)
    cgst_amount = percent_of(say_amount, cgst_percent)
    sgst_amount = percent_of(say_amount, sgst_percent)
    sub_total = say_amount + cgst_amount + sgst_amount
    labour_cess_amount = percent_of(sub_total, labour_cess_percent)

    return BillAbstractTotals(
        actual_value=actual_value,
        say_amount=say_amount,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        sub_total=sub_total,
        labour_cess_amount=labour_cess_amount,
        gross_bill_amount=sub_total + labour_cess_amount,
    )
