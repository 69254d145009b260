import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session, select

from arena.auth import require_admin, require_user
from arena.db import get_session
from arena.dependencies import get_connections
from arena.judge.grader import HIDDEN
from arena.leaderboard import compute_leaderboard
from arena.models import Problem, Submission, TestCase, User
from arena.realtime import LEADERBOARD_UPDATED, ConnectionManager
from arena.schemas import (
    ProblemCreate,
    ProblemDetail,
    ProblemRead,
    ProblemSummary,
    ProblemUpdate,
    TestCaseIn,
    TestCaseRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/problems", tags=["problems"])


def get_problem_or_404(session: Session, problem_id: int) -> Problem:
    problem = session.get(Problem, problem_id)
    if not problem:
        raise HTTPException(status_code=404, detail="Problem not found")
    return problem


def get_test_cases(session: Session, problem_id: int) -> List[TestCase]:
    return session.exec(
        select(TestCase).where(TestCase.problem_id == problem_id).order_by(TestCase.id)
    ).all()


def _add_test_cases(session: Session, problem_id: int, test_cases: List[TestCaseIn]):
    for tc in test_cases:
        session.add(TestCase(problem_id=problem_id, **tc.model_dump()))


def _delete_rows(session: Session, model, *criteria):
    for row in session.exec(select(model).where(*criteria)).all():
        session.delete(row)


def mask_test_case(tc: TestCase) -> TestCaseRead:
    if not tc.is_hidden:
        return TestCaseRead.model_validate(tc, from_attributes=True)
    return TestCaseRead(
        id=tc.id,
        problem_id=tc.problem_id,
        input=HIDDEN,
        expected_output=HIDDEN,
        is_hidden=True,
    )


@router.get("", response_model=List[ProblemSummary])
def list_problems(user: User = Depends(require_user), session: Session = Depends(get_session)):
    problems = session.exec(
        select(Problem).order_by(Problem.created_at.desc(), Problem.id.desc())
    ).all()

    solved_ids = set(session.exec(
        select(Submission.problem_id)
        .where(Submission.user_id == user.id, Submission.status == "pass")
        .distinct()
    ).all())

    return [
        ProblemSummary(**problem.model_dump(), solved=problem.id in solved_ids)
        for problem in problems
    ]


@router.get("/{problem_id}", response_model=ProblemDetail)
def problem_detail(
    problem_id: int,
    user: User = Depends(require_user),
    session: Session = Depends(get_session),
):
    problem = get_problem_or_404(session, problem_id)
    test_cases = get_test_cases(session, problem_id)

    # admins edit test cases, so they see them unmasked
    if user.is_admin:
        shown = [TestCaseRead.model_validate(tc, from_attributes=True) for tc in test_cases]
    else:
        shown = [mask_test_case(tc) for tc in test_cases]

    return ProblemDetail(**problem.model_dump(), test_cases=shown)


@router.post("", response_model=ProblemRead, status_code=status.HTTP_201_CREATED)
def create_problem(
    body: ProblemCreate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
):
    problem = Problem(**body.model_dump(exclude={"test_cases"}))
    session.add(problem)
    session.commit()
    session.refresh(problem)

    _add_test_cases(session, problem.id, body.test_cases)
    session.commit()
    session.refresh(problem)

    logger.info(f"Problem {problem.id} '{problem.title}' created by {admin.username} "
                f"with {len(body.test_cases)} test cases")
    return problem


@router.put("/{problem_id}", response_model=ProblemRead)
def update_problem(
    problem_id: int,
    body: ProblemUpdate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
):
    problem = get_problem_or_404(session, problem_id)

    updates = body.model_dump(exclude_unset=True, exclude={"test_cases"})
    for key, value in updates.items():
        if value is not None:
            setattr(problem, key, value)
    session.add(problem)

    # a new test set replaces the old one entirely
    if body.test_cases is not None:
        _delete_rows(session, TestCase, TestCase.problem_id == problem_id)
        _add_test_cases(session, problem_id, body.test_cases)

    session.commit()
    session.refresh(problem)
    logger.info(f"Problem {problem_id} updated by {admin.username}")
    return problem


def _delete_problem(session: Session, admin: User, problem_id: int) -> None:
    problem = get_problem_or_404(session, problem_id)

    _delete_rows(session, TestCase, TestCase.problem_id == problem_id)
    _delete_rows(session, Submission, Submission.problem_id == problem_id)
    session.delete(problem)
    session.commit()
    logger.info(f"Problem {problem_id} deleted by {admin.username}")


@router.delete("/{problem_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_problem(
    problem_id: int,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
    connections: ConnectionManager = Depends(get_connections),
):
    # removed submissions change the standings
    await run_in_threadpool(_delete_problem, session, admin, problem_id)
    board = await run_in_threadpool(compute_leaderboard, session)
    await connections.broadcast(LEADERBOARD_UPDATED, board)
