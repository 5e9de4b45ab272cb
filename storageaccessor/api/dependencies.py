"""Request-scoped access to the components wired into the app."""

from fastapi import HTTPException, Request, status

from storageaccessor.services.admission import ClaimAdmissionHandler


def get_admission_handler(request: Request) -> ClaimAdmissionHandler:
    """Admission handler built by the application factory."""
    handler = getattr(request.app.state, "admission_handler", None)
    if handler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="admission handler not configured",
        )
    return handler
