"""
Interview question generation endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    InternalError,
    InterviewGeneratorException,
    SchemaParseError,
    SizeLimitExceededError,
    UnsupportedTypeError,
    ValidationError,
)
from app.dependencies import get_interview_service
from app.models.responses import ErrorResponse, GenerateResponse
from app.services.interview_service import InterviewService
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def error_response(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True)
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def generate_interview(
    resume: Optional[UploadFile] = File(None, description="Resume file (PDF only, max 5MB)"),
    interview_service: InterviewService = Depends(get_interview_service)
):
    """
    Analyze a resume and generate interview questions

    - **resume**: PDF resume to analyze
    - **Returns**: Candidate profile and interview questions
    """
    try:
        result = await interview_service.generate(resume)
        return GenerateResponse(data=result)

    except ValidationError as e:
        logger.warning("upload_rejected", reason=e.error_code, error=e.message)
        return error_response(400, e.message)

    except (UnsupportedTypeError, SizeLimitExceededError) as e:
        logger.warning(
            "upload_rejected",
            reason=e.error_code,
            filename=e.file_name,
            error=e.message
        )
        return error_response(400, e.message)

    except SchemaParseError as e:
        logger.warning("model_response_unparseable", error=e.message)
        return error_response(422, "Failed to process resume", e.message)

    except InterviewGeneratorException as e:
        logger.error("interview_generation_failed", error_code=e.error_code, error=e.message)
        return error_response(500, "Internal Server Error", e.message)

    except Exception as e:
        logger.exception(
            "unexpected_error_during_generation",
            error=str(e),
            error_type=type(e).__name__
        )
        internal_error = InternalError(str(e) or type(e).__name__, details={"error_type": type(e).__name__})
        return error_response(500, "Internal Server Error", internal_error.message)
