"""Validating admission endpoint for PersistentVolumeClaims."""

import json

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storageaccessor.api.dependencies import get_admission_handler
from storageaccessor.core.exceptions import AdmissionDecodeError
from storageaccessor.core.logging import get_logger
from storageaccessor.models.admission import AdmissionDialect, AdmissionOutcome
from storageaccessor.services.admission import ClaimAdmissionHandler

logger = get_logger(__name__)

router = APIRouter()

JSON_MEDIA_TYPE = "application/json"


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


@router.post(
    "",
    responses={
        200: {"description": "Admission decision (allowed or denied)"},
        400: {"description": "Malformed or unsupported admission review"},
        500: {"description": "Response could not be encoded"},
    },
    summary="Validate PersistentVolumeClaim",
    description="admission.k8s.io/v1 validating webhook for claim creation",
)
async def validate_claim(
    request: Request,
    handler: ClaimAdmissionHandler = Depends(get_admission_handler),
) -> JSONResponse:
    """
    Decide an admission review for a PersistentVolumeClaim.

    Malformed requests are rejected at the transport level. Once a
    decision is attempted, failures come back as ``allowed: false``.
    """
    if _media_type(request) != JSON_MEDIA_TYPE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"contentType={request.headers.get('content-type')}, "
            f"expected {JSON_MEDIA_TYPE}",
        )

    body = await request.body()
    if not body:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="request body is empty"
        )

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"malformed admission review: {e}",
        )

    try:
        dialect = AdmissionDialect.detect(payload)
        review = dialect.decode(payload)
    except AdmissionDecodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    admission_request = review.request

    try:
        outcome = await run_in_threadpool(handler.decide, admission_request)
    except Exception as e:
        logger.error(
            f"Admission decision failed for {admission_request.uid}: {e}",
            exc_info=True,
        )
        outcome = AdmissionOutcome.deny(f"internal error: {e}")

    try:
        content = dialect.encode(admission_request.uid, outcome)
    except Exception as e:
        logger.error(f"Failed to encode admission response: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"failed to encode admission response: {e}",
        )

    return JSONResponse(content=content, status_code=status.HTTP_200_OK)
