"""Noise report endpoints.

Submission of new reports (multipart form with one media part),
full and per-user listings, and the map aggregation.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from loguru import logger

from noisewatch.api.deps import IngestionServiceDep, ReportStoreDep
from noisewatch.core.exceptions import StorageException, ValidationException
from noisewatch.schemas.report import (
    CoordinateCluster,
    NoiseReportResponse,
    ReportCreatedResponse,
    UserReportsResponse,
)
from noisewatch.services.ingestion import ReportSubmission

router = APIRouter(tags=["Reports"])


@router.post(
    "/new-report",
    response_model=ReportCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a noise report",
)
async def create_report(
    ingestion: IngestionServiceDep,
    media: Annotated[Optional[UploadFile], File()] = None,
    user_id: Annotated[Optional[str], Form(alias="userId")] = None,
    reason: Annotated[Optional[str], Form()] = None,
    comment: Annotated[Optional[str], Form()] = None,
    location: Annotated[Optional[str], Form()] = None,
    media_type: Annotated[Optional[str], Form(alias="mediaType")] = None,
) -> ReportCreatedResponse:
    """Store a new noise report.

    All form fields are optional at the HTTP layer so that missing
    values are reported with the service's own messages.

    Args:
        ingestion: Ingestion service.
        media: Audio or video file.
        user_id: Reference of the submitting user.
        reason: Classification of the disturbance.
        comment: Optional free text.
        location: Serialized JSON object with latitude, longitude and address.
        media_type: ``audio`` or ``video``.

    Returns:
        Confirmation message and the stored report.
    """
    submission = ReportSubmission(
        user_id=user_id,
        reason=reason,
        media_type=media_type,
        comment=comment,
        location=location,
    )
    try:
        report = await ingestion.submit(submission, media)
    except ValidationException:
        raise
    except StorageException as exc:
        raise StorageException(
            "Error saving report",
            details={"error": exc.details.get("error", exc.message)},
        ) from exc
    except Exception as exc:
        logger.exception("Unexpected failure while saving a report")
        raise StorageException("Error saving report", details={"error": str(exc)}) from exc

    return ReportCreatedResponse(
        message="Noise report saved successfully!",
        report=NoiseReportResponse.model_validate(report),
    )


@router.get(
    "/get-report",
    response_model=List[NoiseReportResponse],
    summary="List all reports, most recent first",
)
async def list_reports(store: ReportStoreDep) -> List[NoiseReportResponse]:
    try:
        reports = await store.list_all()
    except StorageException as exc:
        raise StorageException("Error fetching reports") from exc
    return [NoiseReportResponse.model_validate(report) for report in reports]


@router.get(
    "/get-user-report/{user_id}",
    response_model=UserReportsResponse,
    summary="List one user's reports, most recent first",
)
async def list_user_reports(user_id: str, store: ReportStoreDep) -> UserReportsResponse:
    """Return a user's reports; an unknown user yields an empty list.

    Args:
        user_id: Reference of the submitting user.
        store: Report store.

    Returns:
        Message, number of reports and the reports themselves.
    """
    try:
        reports = await store.list_by_user(user_id)
    except StorageException as exc:
        raise StorageException("Server error") from exc

    return UserReportsResponse(
        message="User reports fetched.",
        count=len(reports),
        reports=[NoiseReportResponse.model_validate(report) for report in reports],
    )


@router.get(
    "/map-data",
    response_model=List[CoordinateCluster],
    summary="Report counts grouped by exact coordinate",
)
async def map_data(store: ReportStoreDep) -> List[CoordinateCluster]:
    try:
        return await store.aggregate_by_coordinate()
    except StorageException as exc:
        raise StorageException("Server error", message_key="error") from exc
