"""
Pytest configuration and shared fixtures
"""
import copy
import json
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

# Setup test environment before importing app modules
from tests.test_config import setup_test_environment, cleanup_test_environment

setup_test_environment()

from app.config import Settings  # noqa: E402
from app.services.ai_service import ChatCompletionClient  # noqa: E402

TEST_API_BASE = "https://llm.test/openai/v1"


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Staging directory that does not exist yet"""
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(staging_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        UPLOAD_DIR=str(staging_dir),
        GROQ_API_KEY="test-groq-api-key",
        MODEL="test-model",
        LLM_API_BASE=TEST_API_BASE,
        LOG_LEVEL="DEBUG"
    )


@pytest.fixture
def sample_text_content() -> str:
    """Sample resume text content for testing"""
    return """
John Doe
Software Engineer
Email: john.doe@example.com

EXPERIENCE
Senior Software Engineer at TechCorp (2020-2023)
- Developed web applications using Python and React
- Led a team of 5 developers

Software Developer at StartupXYZ (2018-2020)
- Built REST APIs using FastAPI
- Worked with PostgreSQL databases

SKILLS
Python, JavaScript, React, FastAPI, PostgreSQL, Docker, AWS
"""


@pytest.fixture
def sample_pdf_bytes(sample_text_content: str) -> bytes:
    """A 50 KB upload carrying the PDF signature"""
    content = b"%PDF-1.4\n" + sample_text_content.encode("utf-8")
    return content + b"\n" + b"%" * (50 * 1024 - len(content) - 1)


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    """Well-formed analysis with five interview questions"""
    questions: List[Dict[str, Any]] = [
        {
            "id": index,
            "question": f"Question {index} about {skill}?",
            "expected_answer": f"Key points about {skill}",
            "difficulty": difficulty,
            "type": question_type,
            "skill_tested": skill
        }
        for index, (skill, difficulty, question_type) in enumerate(
            [
                ("Python", "easy", "technical"),
                ("FastAPI", "medium", "technical"),
                ("PostgreSQL", "medium", "technical"),
                ("Team leadership", "hard", "behavioral"),
                ("AWS", "hard", "technical"),
            ],
            start=1
        )
    ]
    return {
        "candidate_profile": {
            "experience_level": "senior",
            "key_skills": ["Python", "FastAPI", "React", "PostgreSQL"],
            "primary_domain": "Backend engineering",
            "years_of_experience": "5 years"
        },
        "interview_questions": questions
    }


@pytest.fixture
def analysis_payload_factory(analysis_payload: Dict[str, Any]) -> Callable[[], Dict[str, Any]]:
    """Fresh deep copies for tests that mutate the payload"""
    return lambda: copy.deepcopy(analysis_payload)


def chat_completion_body(content: str) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ]
    }


@pytest.fixture
def llm_client_factory(test_settings: Settings):
    """
    Build a ChatCompletionClient whose HTTP traffic goes to ``handler``.

    The returned client records the requests it sent on ``.sent_requests``.
    """
    def _create(handler: Callable[[httpx.Request], httpx.Response], **overrides) -> ChatCompletionClient:
        sent_requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(
            base_url=TEST_API_BASE,
            transport=httpx.MockTransport(recording_handler)
        )
        options = {
            "api_key": test_settings.GROQ_API_KEY,
            "model": test_settings.MODEL,
            "api_base": TEST_API_BASE,
            "http_client": http_client,
        }
        options.update(overrides)
        client = ChatCompletionClient(**options)
        client.sent_requests = sent_requests
        return client

    return _create


@pytest.fixture
def completion_handler():
    """Handler factory answering every request with ``content`` as the model output"""
    def _create(content: str) -> Callable[[httpx.Request], httpx.Response]:
        return lambda request: httpx.Response(200, json=chat_completion_body(content))

    return _create


@pytest.fixture
def json_completion_handler(completion_handler, analysis_payload):
    return completion_handler(json.dumps(analysis_payload))


@pytest.fixture
def mock_fastapi_upload_file():
    """Create a FastAPI UploadFile"""
    def _create_upload_file(content: bytes, filename: str, content_type: str) -> UploadFile:
        return UploadFile(
            file=BytesIO(content),
            filename=filename,
            headers=Headers({"content-type": content_type})
        )

    return _create_upload_file


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Setup and cleanup test environment for the entire test session"""
    setup_test_environment()
    yield
    cleanup_test_environment()
