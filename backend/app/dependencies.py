"""
FastAPI dependencies exposing the app-scoped services
"""
from fastapi import Request

from app.services.interview_service import InterviewService
from app.services.user_store import UserStore


def get_interview_service(request: Request) -> InterviewService:
    return request.app.state.interview_service


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store
