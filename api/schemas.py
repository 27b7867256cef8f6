"""
Pydantic schemas for the APICompare HTTP service.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


# ============================================================
# COMPARISON SCHEMAS
# ============================================================

class ComparisonRequest(BaseModel):
    """Request to compare a proposed API against a reference API."""
    reference: dict = Field(..., description="Reference (ground truth) API descriptor")
    proposed: dict = Field(..., description="Proposed API descriptor")
    compare_breaking_api_changes: Optional[bool] = None
    compare_designed_api_changes: Optional[bool] = None


class FindingSchema(BaseModel):
    message: str
    severity: str


class ComparisonResponse(BaseModel):
    breaking_problems: list[str]
    designed_problems: list[str]
    is_breaking: bool
    needs_design_review: bool
    findings: list[FindingSchema] = []


class UpConvertRequest(BaseModel):
    descriptor: dict


class DescriptorInfo(BaseModel):
    name: str
    filename: str
    sim: Optional[str] = None
    version: Optional[str] = None
    format: str
    element_count: int
    type_count: int


class UpConvertResponse(BaseModel):
    was_legacy: bool
    descriptor: dict[str, Any]
