"""
Deduction verification.

    UNVERIFIED ──verify──▶ VERIFIED   (terminal, no un-verify)

A reviewer verifies a bill deduction by supplying voucher details. The
combined operation also books the payment and marks the work as bill
paid; the persistence layer must commit its result in one transaction
and guard the write with "where not verified".
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import ValidationError, VerificationError
from .deductions import DeductionResult, percent_of

logger = logging.getLogger(__name__)


class DeductionStatus(Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"


class WorkStatus(Enum):
    """Work lifecycle as far as billing is concerned."""
    IN_PROGRESS = "inprogress"
    COMPLETED = "completed"
    BILL_PAID = "billpaid"


@dataclass(frozen=True)
class VoucherDetails:
    """Voucher metadata entered by the reviewer."""
    bill_payment_date: Optional[date] = None
    egram_voucher: str = ""
    egram_voucher_date: Optional[date] = None
    gpms_voucher_number: str = ""
    gpms_voucher_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bill_payment_date": self.bill_payment_date.isoformat() if self.bill_payment_date else None,
            "egram_voucher": self.egram_voucher,
            "egram_voucher_date": self.egram_voucher_date.isoformat() if self.egram_voucher_date else None,
            "gpms_voucher_number": self.gpms_voucher_number,
            "gpms_voucher_date": self.gpms_voucher_date.isoformat() if self.gpms_voucher_date else None,
        }


@dataclass(frozen=True)
class DeductionRecord:
    """A stored bill deduction and its verification state."""
    id: str
    work_id: str
    result: DeductionResult
    bill_number: str = ""
    bill_type: str = ""
    is_final_bill: bool = False
    status: DeductionStatus = DeductionStatus.UNVERIFIED
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    voucher: Optional[VoucherDetails] = None

    @property
    def is_verified(self) -> bool:
        return self.status == DeductionStatus.VERIFIED

    @classmethod
    def from_result(
        cls,
        id: str,
        work_id: str,
        result: DeductionResult,
        bill_number: str = "",
        bill_type: str = "",
        is_final_bill: bool = False,
    ) -> "DeductionRecord":
        """New, unverified record for a freshly computed deduction."""
        return cls(
            id=id,
            work_id=work_id,
            result=result,
            bill_number=bill_number,
            bill_type=bill_type,
            is_final_bill=is_final_bill,
        )


@dataclass(frozen=True)
class WorkRecord:
    id: str
    status: WorkStatus = WorkStatus.COMPLETED


@dataclass(frozen=True)
class PaymentRecord:
    """Payment booked against a work once its deduction is verified."""
    work_id: str
    deduction_id: str
    gross_bill_amount: int
    net_amount: int
    income_tax_amount: int
    labour_cess_amount: int
    tds_cgst_amount: int
    tds_sgst_amount: int
    security_deposit_amount: int
    bill_type: str
    mb_ref_no: str
    is_final_bill: bool
    bill_payment_date: date
    voucher: VoucherDetails

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_id": self.work_id,
            "deduction_id": self.deduction_id,
            "gross_bill_amount": self.gross_bill_amount,
            "net_amount": self.net_amount,
            "income_tax_amount": self.income_tax_amount,
            "labour_cess_amount": self.labour_cess_amount,
            "tds_cgst_amount": self.tds_cgst_amount,
            "tds_sgst_amount": self.tds_sgst_amount,
            "security_deposit_amount": self.security_deposit_amount,
            "bill_type": self.bill_type,
            "mb_ref_no": self.mb_ref_no,
            "is_final_bill": self.is_final_bill,
            "bill_payment_date": self.bill_payment_date.isoformat(),
            "voucher": self.voucher.to_dict(),
        }


@dataclass(frozen=True)
class VerificationOutcome:
    """Everything the caller must persist atomically."""
    record: DeductionRecord
    payment: Optional[PaymentRecord] = None
    work: Optional[WorkRecord] = None


def ensure_unverified(record: DeductionRecord) -> None:
    """Precondition for every verification path."""
    if record.is_verified:
        raise VerificationError(f"deduction {record.id} is already verified", "status")


def verify_deduction(
    record: DeductionRecord,
    voucher: VoucherDetails,
    verified_by: str,
    verified_at: Optional[datetime] = None,
) -> DeductionRecord:
    """
    Mark a deduction verified.

    Returns a new record; the input is left as it was.

    Raises:
        VerificationError: the record is already verified
        ValidationError: no reviewer given
    """
    ensure_unverified(record)
    if not verified_by:
        raise ValidationError("reviewer is required", "verified_by")

    verified = replace(
        record,
        status=DeductionStatus.VERIFIED,
        verified_by=verified_by,
        verified_at=verified_at or datetime.now(),
        voucher=voucher,
    )
    logger.info(f"Deduction {record.id} verified by {verified_by}")
    return verified


def _register_amount(value: float) -> int:
    return percent_of(value, 100)


def verify_and_record_payment(
    record: DeductionRecord,
    voucher: VoucherDetails,
    verified_by: str,
    work: WorkRecord,
    mb_ref_no: Optional[str] = None,
    verified_at: Optional[datetime] = None,
) -> VerificationOutcome:
    """
    Verify, book the payment and mark the work bill paid, as one step.

    Register amounts are whole rupees. All checks run before anything is
    built, so a failure leaves nothing half-done.

    Raises:
        VerificationError: the record is already verified
        ValidationError: the work does not match or is already paid
    """
    ensure_unverified(record)
    if work.id != record.work_id:
        raise ValidationError(
            f"deduction {record.id} belongs to work {record.work_id}, not {work.id}", "work_id",
        )
    if work.status == WorkStatus.BILL_PAID:
        raise ValidationError(f"work {work.id} is already bill paid", "work_status")

    verified = verify_deduction(record, voucher, verified_by, verified_at)
    result = record.result

    payment = PaymentRecord(
        work_id=work.id,
        deduction_id=record.id,
        gross_bill_amount=_register_amount(result.gross),
        net_amount=_register_amount(result.net_payable),
        income_tax_amount=_register_amount(result.income_tax_amount),
        labour_cess_amount=_register_amount(result.labour_cess_amount),
        tds_cgst_amount=_register_amount(result.cgst_amount),
        tds_sgst_amount=_register_amount(result.sgst_amount),
        security_deposit_amount=_register_amount(result.security_deposit_amount),
        bill_type=record.bill_type,
        mb_ref_no=mb_ref_no or record.bill_number,
        is_final_bill=record.is_final_bill,
        bill_payment_date=voucher.bill_payment_date or verified.verified_at.date(),
        voucher=voucher,
    )
    paid_work = replace(work, status=WorkStatus.BILL_PAID)

    logger.info(f"Payment recorded for work {work.id}: net {payment.net_amount}")
    return VerificationOutcome(record=verified, payment=payment, work=paid_work)
