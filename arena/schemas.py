"""Request and response models for the JSON API."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from arena.judge.grader import TestResult

Language = Literal["python", "c", "cpp", "java"]


# --- Users ---

class RegisterRequest(SQLModel):
    username: str = Field(min_length=3, max_length=32)
    password: str = Field(min_length=6, max_length=72)
    email: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(SQLModel):
    username: str
    password: str


class ProfileUpdate(SQLModel):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    age: Optional[int] = Field(default=None, ge=1, le=120)
    college: Optional[str] = Field(default=None, min_length=1, max_length=120)
    department: Optional[str] = Field(default=None, min_length=1, max_length=120)

    @field_validator("display_name", "college", "department")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class UserRead(SQLModel):
    id: int
    username: str
    email: Optional[str] = None
    display_name: str
    profile_image_url: Optional[str] = None
    is_admin: bool
    age: Optional[int] = None
    college: Optional[str] = None
    department: Optional[str] = None
    profile_complete: bool
    created_at: datetime


# --- Problems ---

class TestCaseIn(SQLModel):
    __test__ = False

    input: str
    expected_output: str
    is_hidden: bool = True


class TestCaseRead(TestCaseIn):
    id: int
    problem_id: int


class ProblemBase(SQLModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    constraints: str = Field(min_length=1)
    sample_input: str = Field(min_length=1)
    sample_output: str = Field(min_length=1)
    marks: int = Field(default=25, gt=0)


class ProblemCreate(ProblemBase):
    test_cases: List[TestCaseIn] = []


class ProblemUpdate(SQLModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    constraints: Optional[str] = Field(default=None, min_length=1)
    sample_input: Optional[str] = Field(default=None, min_length=1)
    sample_output: Optional[str] = Field(default=None, min_length=1)
    marks: Optional[int] = Field(default=None, gt=0)
    test_cases: Optional[List[TestCaseIn]] = None


class ProblemRead(ProblemBase):
    id: int
    created_at: datetime


class ProblemSummary(ProblemRead):
    solved: bool = False


class ProblemDetail(ProblemRead):
    test_cases: List[TestCaseRead] = []


# --- Submissions ---

class RunCodeRequest(SQLModel):
    code: str = Field(min_length=1)
    language: Language
    problem_id: int


class RunCodeResponse(SQLModel):
    status: Literal["pass", "fail", "error"]
    results: List[TestResult]
    message: Optional[str] = None


class SubmissionRead(SQLModel):
    id: int
    user_id: int
    problem_id: int
    code: str
    language: str
    status: str
    score: int
    output: Optional[str] = None
    created_at: datetime


class SubmissionWithTitle(SubmissionRead):
    problem_title: str
