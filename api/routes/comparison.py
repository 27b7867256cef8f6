"""
Comparison routes for APICompare.

Provides API descriptor comparison and legacy up-conversion.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from api.schemas import (
    ComparisonRequest,
    ComparisonResponse,
    DescriptorInfo,
    FindingSchema,
    UpConvertRequest,
    UpConvertResponse
)
from comparator import (
    APICompareError,
    ComparisonReport,
    compare_apis,
    format_report,
    is_legacy_descriptor,
    parse_descriptor_content,
    up_convert
)
from config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_response(report: ComparisonReport) -> ComparisonResponse:
    return ComparisonResponse(
        breaking_problems=report.breaking_problems,
        designed_problems=report.designed_problems,
        is_breaking=report.is_breaking,
        needs_design_review=report.needs_design_review,
        findings=[FindingSchema(**f.to_dict()) for f in report.findings]
    )


def _run_comparison(reference: dict, proposed: dict, breaking, designed) -> ComparisonReport:
    try:
        return compare_apis(
            reference,
            proposed,
            compare_breaking_api_changes=settings.COMPARE_BREAKING_API_CHANGES if breaking is None else breaking,
            compare_designed_api_changes=settings.COMPARE_DESIGNED_API_CHANGES if designed is None else designed
        )
    except APICompareError as e:
        logger.warning(f"Comparison failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@router.post("", response_model=ComparisonResponse)
async def compare_descriptors(request: ComparisonRequest):
    """
    Compare two API descriptors and return breaking and designed problems.
    """
    report = _run_comparison(
        request.reference,
        request.proposed,
        request.compare_breaking_api_changes,
        request.compare_designed_api_changes
    )
    return _to_response(report)


@router.post("/files")
async def compare_files(
    reference_file: UploadFile = File(...),
    proposed_file: UploadFile = File(...),
    compare_breaking_api_changes: Optional[bool] = None,
    compare_designed_api_changes: Optional[bool] = None
):
    """
    Compare two uploaded API descriptor files.
    """
    parsed = []
    for label, upload in (("Reference", reference_file), ("Proposed", proposed_file)):
        if not upload.filename.lower().endswith('.json'):
            raise HTTPException(status_code=400, detail=f"{label} file must be JSON")
        content = await upload.read()
        try:
            text = content.decode('utf-8')
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail=f"{label} file is not UTF-8")
        result = parse_descriptor_content(text, upload.filename)
        if result is None:
            raise HTTPException(status_code=400, detail=f"Invalid JSON in {label.lower()} file")
        parsed.append(result)

    reference, proposed = parsed
    report = _run_comparison(
        reference.descriptor,
        proposed.descriptor,
        compare_breaking_api_changes,
        compare_designed_api_changes
    )

    return {
        "reference": DescriptorInfo(**{k: getattr(reference, k) for k in DescriptorInfo.model_fields}),
        "proposed": DescriptorInfo(**{k: getattr(proposed, k) for k in DescriptorInfo.model_fields}),
        **_to_response(report).model_dump(),
        "report": format_report(
            report,
            reference.filename,
            proposed.filename,
            app_name=settings.APP_NAME,
            app_version=settings.APP_VERSION
        )
    }


@router.post("/up-convert", response_model=UpConvertResponse)
async def up_convert_descriptor(request: UpConvertRequest):
    """
    Convert a legacy (flat) descriptor to the nested tree format.
    """
    if not isinstance(request.descriptor.get("phetioElements"), dict):
        raise HTTPException(status_code=422, detail="Descriptor is missing the 'phetioElements' map")
    return UpConvertResponse(
        was_legacy=is_legacy_descriptor(request.descriptor),
        descriptor=up_convert(request.descriptor)
    )
