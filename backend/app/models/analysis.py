"""
Pydantic schema for the structured analysis returned by the model
"""
from typing import List, Literal

from pydantic import BaseModel, ConfigDict

ExperienceLevel = Literal["entry", "mid", "senior"]
Difficulty = Literal["easy", "medium", "hard"]
QuestionType = Literal["technical", "behavioral"]


class StrictModel(BaseModel):
    """Rejects unknown keys and lossy coercions"""
    model_config = ConfigDict(extra="forbid", strict=True)


class CandidateProfile(StrictModel):
    experience_level: ExperienceLevel
    key_skills: List[str]
    primary_domain: str
    years_of_experience: str


class InterviewQuestion(StrictModel):
    id: int
    question: str
    expected_answer: str
    difficulty: Difficulty
    type: QuestionType
    skill_tested: str


class AnalysisResult(StrictModel):
    """Candidate profile plus ordered interview questions"""
    candidate_profile: CandidateProfile
    interview_questions: List[InterviewQuestion]
