"""
Estimate Input Schema
Strict pydantic records for estimate payloads coming from the web layer
or from JSON/YAML files.

Derived fields (quantity on measurements, amount everywhere) are accepted
and ignored: the computation engine is the only source of those numbers.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ValidationError
from .drain import PARAM_LABELS
from .models import EstimateDocument, EstimateLineItem, Measurement, ProjectInfo, SubItem
from .units import unit_kind

logger = logging.getLogger(__name__)


def _check_unit(v: str) -> str:
    try:
        unit_kind(v)
    except ValidationError as e:
        raise ValueError(e.message)
    return v.strip()


def _check_param(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in PARAM_LABELS:
        raise ValueError(f"unknown drain parameter {v!r}")
    return v


class MeasurementRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    description: str = ""
    nos: float = Field(default=0.0, ge=0)
    length: float = Field(default=0.0, ge=0)
    breadth: float = Field(default=0.0, ge=0)
    depth: float = Field(default=0.0, ge=0)

    def to_model(self) -> Measurement:
        return Measurement(
            description=self.description,
            nos=self.nos,
            length=self.length,
            breadth=self.breadth,
            depth=self.depth,
        )


class SubItemRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: Optional[str] = None
    description: str = Field(min_length=1)
    unit: str
    rate: float = Field(default=0.0, ge=0)
    quantity: float = Field(default=0.0, ge=0)
    measurements: List[MeasurementRecord] = Field(default_factory=list)

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v):
        return _check_unit(v)

    def to_model(self) -> SubItem:
        return SubItem(
            id=self.id,
            description=self.description,
            unit=self.unit,
            rate=self.rate,
            quantity=self.quantity,
            measurements=[m.to_model() for m in self.measurements],
        )


class LineItemRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: Optional[str] = None
    sl_no: Optional[int] = Field(default=None, ge=1)
    schedule_page_no: str = ""
    description: str = Field(min_length=1)
    unit: str
    rate: float = Field(default=0.0, ge=0)
    quantity: float = Field(default=0.0, ge=0)
    nos: float = Field(default=1.0, ge=0)
    length: float = Field(default=0.0, ge=0)
    breadth: float = Field(default=0.0, ge=0)
    depth: float = Field(default=0.0, ge=0)
    length_param: Optional[str] = None
    breadth_param: Optional[str] = None
    depth_param: Optional[str] = None
    measurements: List[MeasurementRecord] = Field(default_factory=list)
    sub_items: List[SubItemRecord] = Field(default_factory=list)

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v):
        return _check_unit(v)

    @field_validator("length_param", "breadth_param", "depth_param")
    @classmethod
    def validate_param(cls, v):
        return _check_param(v)

    def to_model(self, position: int) -> EstimateLineItem:
        return EstimateLineItem(
            id=self.id,
            sl_no=self.sl_no or position,
            schedule_page_no=self.schedule_page_no,
            description=self.description,
            unit=self.unit,
            rate=self.rate,
            quantity=self.quantity,
            nos=self.nos,
            length=self.length,
            breadth=self.breadth,
            depth=self.depth,
            length_param=self.length_param,
            breadth_param=self.breadth_param,
            depth_param=self.depth_param,
            measurements=[m.to_model() for m in self.measurements],
            sub_items=[s.to_model() for s in self.sub_items],
        )


class ProjectInfoRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, allow_inf_nan=False)

    project_name: str = ""
    project_code: str = ""
    location: str = ""
    prepared_by: str = ""
    fund: str = ""
    date: str = ""

    def to_model(self) -> ProjectInfo:
        return ProjectInfo(**self.model_dump())


class EstimateRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    project: ProjectInfoRecord = Field(default_factory=ProjectInfoRecord)
    items: List[LineItemRecord] = Field(default_factory=list)
    contingency: float = Field(default=0.0, ge=0)

    def to_model(self) -> EstimateDocument:
        return EstimateDocument(
            project=self.project.to_model(),
            items=[item.to_model(i + 1) for i, item in enumerate(self.items)],
            contingency=self.contingency,
        )


def _first_error(exc: pydantic.ValidationError) -> ValidationError:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return ValidationError(error.get("msg", "invalid value"), location or None)


def parse_estimate(data: Dict[str, Any]) -> EstimateDocument:
    """
    Validate a raw estimate payload.

    Raises:
        ValidationError: first schema violation, with its field path
    """
    try:
        record = EstimateRecord.model_validate(data)
    except pydantic.ValidationError as e:
        raise _first_error(e) from e
    return record.to_model()


def read_payload(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON or YAML payload file into a dict."""
    path = Path(path)
    with open(path, "r") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValidationError(f"{path.name} must contain a mapping")
    return data


def load_estimate(path: Union[str, Path]) -> EstimateDocument:
    """Load and validate an estimate from a JSON or YAML file."""
    document = parse_estimate(read_payload(path))
    logger.info(f"Loaded estimate from {path}: {len(document.items)} items")
    return document
