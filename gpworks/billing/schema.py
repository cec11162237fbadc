"""
Bill deduction input records (pydantic), as posted by the deduction form
or read from a JSON/YAML file.

A bill either states its gross amount directly, or gives the measured
value of work done and lets compute_bill_gross() build the gross.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import ValidationError
from ..estimate.schema import _first_error, read_payload
from .deductions import DeductionRates

logger = logging.getLogger(__name__)


@dataclass
class BillInfo:
    """Header block printed on the deduction slip."""
    work_id: str = ""
    work_name: str = ""
    agency: str = ""
    contractor: str = ""
    bill_number: str = ""
    bill_type: str = ""
    is_final_bill: bool = False
    date: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_id": self.work_id,
            "work_name": self.work_name,
            "agency": self.agency,
            "contractor": self.contractor,
            "bill_number": self.bill_number,
            "bill_type": self.bill_type,
            "is_final_bill": self.is_final_bill,
            "date": self.date,
        }


class RatesRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    income_tax: Optional[float] = Field(default=None, ge=0, le=100)
    gst_tds: Optional[float] = Field(default=None, ge=0, le=100)
    labour_cess: Optional[float] = Field(default=None, ge=0, le=100)
    security_deposit: Optional[float] = Field(default=None, ge=0, le=100)


class BillRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, allow_inf_nan=False)

    work_id: str = ""
    work_name: str = ""
    agency: str = ""
    contractor: str = ""
    bill_number: str = ""
    bill_type: str = "Running"
    is_final_bill: bool = False
    date: str = ""
    gross: Optional[float] = Field(default=None, ge=0)
    actual_value: Optional[float] = Field(default=None, ge=0)
    rates: RatesRecord = Field(default_factory=RatesRecord)

    @model_validator(mode="after")
    def require_amount(self):
        if self.gross is None and self.actual_value is None:
            raise ValueError("either gross or actual_value is required")
        return self

    def info(self) -> BillInfo:
        return BillInfo(
            work_id=self.work_id,
            work_name=self.work_name,
            agency=self.agency,
            contractor=self.contractor,
            bill_number=self.bill_number,
            bill_type=self.bill_type,
            is_final_bill=self.is_final_bill,
            date=self.date,
        )

    def resolve_rates(self, defaults: Optional[Dict[str, float]] = None) -> DeductionRates:
        """Stated rates over the configured defaults."""
        merged = dict(defaults or {})
        merged.update(self.rates.model_dump(exclude_none=True))
        return DeductionRates.from_dict(merged)


def parse_bill(data: Dict[str, Any]) -> BillRecord:
    """
    Validate a raw bill payload.

    Raises:
        ValidationError: first schema violation, with its field path
    """
    try:
        return BillRecord.model_validate(data)
    except pydantic.ValidationError as e:
        raise _first_error(e) from e


def load_bill(path: Union[str, Path]) -> BillRecord:
    record = parse_bill(read_payload(path))
    logger.info(f"Loaded bill {record.bill_number or '(unnumbered)'} from {path}")
    return record
