from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: Optional[str] = None
    password_hash: str
    display_name: str
    profile_image_url: Optional[str] = None
    is_admin: bool = False
    # profile completeness
    age: Optional[int] = None
    college: Optional[str] = None
    department: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def profile_complete(self) -> bool:
        return self.age is not None and bool(self.college) and bool(self.department)


class Problem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    constraints: str
    sample_input: str
    sample_output: str
    marks: int = 25
    created_at: datetime = Field(default_factory=utcnow)


class TestCase(SQLModel, table=True):
    __test__ = False  # not a pytest class

    id: Optional[int] = Field(default=None, primary_key=True)
    problem_id: int = Field(foreign_key="problem.id", index=True)
    input: str
    expected_output: str
    is_hidden: bool = True


class Submission(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    problem_id: int = Field(foreign_key="problem.id", index=True)
    code: str
    language: str  # "python" | "c" | "cpp" | "java"
    status: str = "pending"  # pending | pass | fail
    score: int = 0
    output: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
