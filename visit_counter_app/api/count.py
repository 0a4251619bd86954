from fastapi import APIRouter, Depends, Response, status

from visit_counter_app.dependencies import get_count_service, get_visit
from visit_counter_app.schemas.count import CountResponse, ErrorResponse, VisitContext
from visit_counter_app.services.count_service import CountService

router = APIRouter(tags=["count"])


@router.get(
    "/count",
    response_model=CountResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def get_count(
    visit: VisitContext = Depends(get_visit),
    count_service: CountService = Depends(get_count_service)
):
    """
    Count a visit from the caller's address.

    Any failure after the increment becomes a generic 500
    (see the VisitCounterError handler); the visit stays counted.
    """
    return await count_service.record_visit(visit)


@router.get("/health")
def health_check():
    """Liveness only: no dependency is checked"""
    return Response(status_code=status.HTTP_200_OK)
