import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.models.schemas import CreateUser
from app.observability.spans import instrument
from app.services.user_service import UsernameValidationError, create_user as build_user

router = APIRouter(tags=["users"])

logger = structlog.get_logger(__name__)


@router.post("/users", status_code=201)
@instrument()
async def create_user(payload: CreateUser) -> JSONResponse:
    """Mock user creation: 201 with the record, or 400 with a ``null`` body."""

    try:
        user = build_user(payload)
    except UsernameValidationError as exc:
        logger.error("user_validation_failed", **{"error.kind": exc.kind, "error.message": str(exc)})
        return JSONResponse(status_code=400, content=None)

    logger.info("user_created", **{"response.body": user.model_dump()})
    return JSONResponse(status_code=201, content=user.model_dump())
