"""
Resume-to-interview-questions pipeline
"""
import time
from typing import Optional

from fastapi import UploadFile

from app.config import Settings
from app.core.staging import TemporaryFileManager
from app.models.analysis import AnalysisResult
from app.services.ai_service import ChatCompletionClient, PromptEngine, ResponseParser
from app.services.document_service import DocumentService
from app.utils.file_utils import validate_upload_file
from app.utils.logger import get_logger

logger = get_logger(__name__)


class InterviewService:
    """
    Chains intake, staging, extraction, prompting, the model call and parsing.

    The staged file lives only as long as text extraction; by the time the
    model is called it has already been released.
    """

    def __init__(
        self,
        settings: Settings,
        file_manager: TemporaryFileManager,
        llm_client: ChatCompletionClient,
        document_service: Optional[DocumentService] = None,
        prompt_engine: Optional[PromptEngine] = None,
        response_parser: Optional[ResponseParser] = None
    ):
        self.settings = settings
        self.file_manager = file_manager
        self.llm_client = llm_client
        self.document_service = document_service or DocumentService()
        self.prompt_engine = prompt_engine or PromptEngine(settings.INTERVIEW_QUESTION_COUNT)
        self.response_parser = response_parser or ResponseParser()

    async def generate(self, upload_file: Optional[UploadFile]) -> AnalysisResult:
        start_time = time.time()

        upload = await validate_upload_file(upload_file, self.settings)
        logger.info(
            "interview_generation_started",
            filename=upload.safe_filename,
            original_filename=upload.original_filename,
            file_size=upload.file_size
        )

        async with self.file_manager.staged_async(
            upload.content, upload.safe_filename, upload.content_type
        ) as document:
            processed = await self.document_service.extract_text(document)

        prompt = self.prompt_engine.build(processed.text)
        raw_response = await self.llm_client.generate(prompt)
        result = self.response_parser.normalize(raw_response)

        logger.info(
            "interview_generation_completed",
            filename=upload.safe_filename,
            question_count=len(result.interview_questions),
            processing_time=time.time() - start_time
        )
        return result
