"""
Profile endpoint - SQL query optimization strategies
"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from autoprofiler.core.errors import (
    InvalidInputSql,
    ModelInvocationError,
    OracleInvocationError,
    SchemaRepairExhausted,
    SqlRepairExhausted,
)
from autoprofiler.dependencies.profile import get_profile_service
from autoprofiler.dtos import ThoughtResult
from autoprofiler.schemas import ProfileRequest
from autoprofiler.services import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profile"])


@router.post("/profile", response_model=ThoughtResult)
async def post_profile(
    body: ProfileRequest,
    service: ProfileService = Depends(get_profile_service)
) -> ThoughtResult:
    """
    Generate optimization strategies for a query, each with a validated
    and formatted implementation

    This controller is thin - delegates to service layer
    """
    logger.info(f"Profiling query with {len(body.tables)} table(s)")

    try:
        return await service.profile(body.query, body.tables)
    except InvalidInputSql as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (SchemaRepairExhausted, SqlRepairExhausted) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ModelInvocationError, OracleInvocationError) as e:
        raise HTTPException(status_code=502, detail=str(e))
