"""
Integration tests for API endpoints
Tests the generate workflow end to end over HTTP, with the LLM provider
replaced by a mock transport, plus the profile and health endpoints.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import StorageError
from app.main import create_app
from app.models.entities import UserProfile
from app.services.user_store import InMemoryUserStore, UserStore
from tests.helpers import staged_files


@pytest.fixture
def client_factory(test_settings, llm_client_factory):
    """Build a TestClient around an app whose LLM calls go to ``handler``"""
    def _create(handler, **overrides):
        llm_client = overrides.pop("llm_client", None) or llm_client_factory(handler)
        app = create_app(settings=test_settings, llm_client=llm_client, **overrides)
        return TestClient(app, raise_server_exceptions=False), llm_client

    return _create


def resume_upload(content: bytes, filename: str = "resume.pdf", content_type: str = "application/pdf") -> dict:
    return {"resume": (filename, content, content_type)}


class TestGenerateEndpoint:
    """Test status codes, envelopes and cleanup for POST /generate"""

    def test_generate_success(self, client_factory, json_completion_handler, sample_pdf_bytes, staging_dir):
        """Test a 50 KB PDF yields 200 with five complete questions"""
        client, llm_client = client_factory(json_completion_handler)

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["candidate_profile"]["experience_level"] == "senior"

        questions = data["data"]["interview_questions"]
        assert len(questions) == 5
        for question in questions:
            for field in ("question", "expected_answer", "difficulty", "type", "skill_tested"):
                assert question[field]

        assert len(llm_client.sent_requests) == 1
        assert staged_files(staging_dir) == []

    def test_generate_fenced_response(self, client_factory, completion_handler, analysis_payload, sample_pdf_bytes):
        """Test a ```json fenced model reply is unwrapped and parsed"""
        fenced = "```json\n" + json.dumps(analysis_payload, indent=2) + "\n```"
        client, _ = client_factory(completion_handler(fenced))

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 200
        assert response.json()["data"] == analysis_payload

    def test_missing_file_returns_400(self, client_factory, json_completion_handler):
        client, llm_client = client_factory(json_completion_handler)

        response = client.post("/generate", data={"note": "no file attached"})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Please upload a resume file (PDF only)"
        }
        assert llm_client.sent_requests == []

    def test_text_field_instead_of_file_returns_400(self, client_factory, json_completion_handler, staging_dir):
        """Test a plain form value in the resume field is treated as a missing file"""
        client, llm_client = client_factory(json_completion_handler)

        response = client.post("/generate", data={"resume": "not a file"})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Please upload a resume file (PDF only)"
        }
        assert llm_client.sent_requests == []
        assert staged_files(staging_dir) == []

    def test_disallowed_type_returns_400(self, client_factory, json_completion_handler, staging_dir):
        """Test a non-PDF upload is rejected and nothing is staged"""
        client, llm_client = client_factory(json_completion_handler)

        response = client.post(
            "/generate",
            files=resume_upload(b"Jane Roe\nEngineer", "resume.txt", "text/plain")
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "application/pdf" in body["message"]
        assert "error" not in body
        assert staged_files(staging_dir) == []
        assert llm_client.sent_requests == []

    def test_oversized_file_returns_400(self, client_factory, json_completion_handler, staging_dir):
        client, llm_client = client_factory(json_completion_handler)
        oversized = b"%PDF-1.4\n" + b"x" * (5 * 1024 * 1024)

        response = client.post("/generate", files=resume_upload(oversized))

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "maximum allowed size" in response.json()["message"]
        assert staged_files(staging_dir) == []
        assert llm_client.sent_requests == []

    def test_prose_response_returns_422(self, client_factory, completion_handler, sample_pdf_bytes, staging_dir):
        """Test a plain-prose model reply is reported as a parse failure"""
        client, _ = client_factory(completion_handler("This candidate is a strong fit for the role."))

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Failed to process resume"
        assert "not valid JSON" in body["error"]
        assert staged_files(staging_dir) == []

    def test_incomplete_schema_returns_422(
        self, client_factory, completion_handler, analysis_payload_factory, sample_pdf_bytes
    ):
        payload = analysis_payload_factory()
        del payload["interview_questions"][0]["difficulty"]
        client, _ = client_factory(completion_handler(json.dumps(payload)))

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 422
        assert "interview_questions.0.difficulty" in response.json()["error"]

    def test_deeply_nested_response_returns_422(
        self, client_factory, completion_handler, sample_pdf_bytes, staging_dir
    ):
        client, _ = client_factory(completion_handler("[" * 100000 + "]" * 100000))

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 422
        assert response.json()["message"] == "Failed to process resume"
        assert staged_files(staging_dir) == []

    def test_provider_unreachable_returns_500(self, client_factory, sample_pdf_bytes, staging_dir):
        """Test a transport failure yields 500 and the staged file is still gone"""
        def unreachable(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client, _ = client_factory(unreachable)

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal Server Error"
        assert "Could not reach groq API" in body["error"]
        assert "Traceback" not in body["error"]
        assert staging_dir.exists()
        assert staged_files(staging_dir) == []

    def test_provider_error_status_returns_500(self, client_factory, sample_pdf_bytes):
        client, llm_client = client_factory(lambda request: httpx.Response(429, json={"error": "rate limited"}))

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 500
        assert "HTTP 429" in response.json()["error"]
        assert len(llm_client.sent_requests) == 1

    def test_missing_model_configuration_returns_500(
        self, client_factory, llm_client_factory, json_completion_handler, sample_pdf_bytes, staging_dir
    ):
        llm_client = llm_client_factory(json_completion_handler, model=None)
        client, _ = client_factory(json_completion_handler, llm_client=llm_client)

        response = client.post("/generate", files=resume_upload(sample_pdf_bytes))

        assert response.status_code == 500
        assert response.json()["error"] == "Missing required configuration: MODEL"
        assert llm_client.sent_requests == []
        assert staged_files(staging_dir) == []

    def test_request_id_header_echoed(self, client_factory, json_completion_handler, sample_pdf_bytes):
        client, _ = client_factory(json_completion_handler)

        response = client.post(
            "/generate",
            files=resume_upload(sample_pdf_bytes),
            headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"


class FailingUserStore(UserStore):

    async def get_user(self, user_id):
        raise StorageError("connection reset", operation="get_user")


class TestProfileEndpoint:

    @pytest.fixture
    def user_store(self):
        return InMemoryUserStore([
            UserProfile(
                id="user-1",
                email="jane@example.com",
                username="jane",
                gender="female",
                avatar_id="avatar-7"
            )
        ])

    def test_profile_success(self, client_factory, json_completion_handler, user_store):
        client, _ = client_factory(json_completion_handler, user_store=user_store)

        response = client.get("/profile", headers={"X-User-Id": "user-1"})

        assert response.status_code == 200
        assert response.json() == {
            "email": "jane@example.com",
            "username": "jane",
            "gender": "female",
            "avatar_id": "avatar-7"
        }

    def test_profile_not_found(self, client_factory, json_completion_handler, user_store):
        client, _ = client_factory(json_completion_handler, user_store=user_store)

        response = client.get("/profile", headers={"X-User-Id": "someone-else"})

        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    def test_profile_requires_identity(self, client_factory, json_completion_handler, user_store):
        client, _ = client_factory(json_completion_handler, user_store=user_store)

        response = client.get("/profile")

        assert response.status_code == 401
        assert response.json() == {"message": "Authentication required"}

    def test_profile_storage_error(self, client_factory, json_completion_handler):
        client, _ = client_factory(json_completion_handler, user_store=FailingUserStore())

        response = client.get("/profile", headers={"X-User-Id": "user-1"})

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}

    def test_custom_authenticator(self, client_factory, json_completion_handler, user_store):
        """Test the authenticator collaborator can be replaced"""
        async def fixed_identity(request):
            return {"user_id": "user-1"}

        client, _ = client_factory(
            json_completion_handler, user_store=user_store, authenticator=fixed_identity
        )

        response = client.get("/profile")

        assert response.status_code == 200
        assert response.json()["username"] == "jane"


class TestHealthEndpoint:

    def test_basic_health_check(self, client_factory, json_completion_handler):
        client, _ = client_factory(json_completion_handler)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "Resume Interview Generator"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data


class TestAppFactory:

    def test_import_builds_no_app(self):
        """Test importing the module leaves construction to create_app"""
        import app.main

        assert not hasattr(app.main, "app")
        assert callable(app.main.create_app)
