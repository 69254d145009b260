import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session, select

from arena.auth import require_user
from arena.db import get_session
from arena.dependencies import get_connections, get_executor
from arena.judge.grader import run_tests
from arena.judge.piston import PistonClient
from arena.leaderboard import compute_leaderboard
from arena.models import Problem, Submission, TestCase, User
from arena.realtime import LEADERBOARD_UPDATED, ConnectionManager
from arena.routers.problems import get_problem_or_404, get_test_cases
from arena.schemas import (
    RunCodeRequest,
    RunCodeResponse,
    SubmissionRead,
    SubmissionWithTitle,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["submissions"])

NO_TEST_CASES = "Problem has no test cases"
ALL_MUST_PASS = "All test cases must pass to submit."


def _load_problem(session: Session, problem_id: int) -> Tuple[Problem, List[TestCase]]:
    problem = get_problem_or_404(session, problem_id)
    return problem, get_test_cases(session, problem_id)


def _save_accepted(session: Session, user: User, problem: Problem, body: RunCodeRequest) -> Submission:
    sub = Submission(
        user_id=user.id,
        problem_id=problem.id,
        code=body.code,
        language=body.language,
        status="pass",
        score=problem.marks,
        output="All test cases passed",
    )
    session.add(sub)
    session.commit()
    session.refresh(sub)
    logger.info(f"Accepted submission {sub.id}: user {user.username} solved problem {sub.problem_id} "
                f"(+{sub.score})")
    return sub


@router.post("/run", response_model=RunCodeResponse)
async def run_code(
    body: RunCodeRequest,
    user: User = Depends(require_user),
    session: Session = Depends(get_session),
    executor: PistonClient = Depends(get_executor),
):
    _, test_cases = await run_in_threadpool(_load_problem, session, body.problem_id)
    if not test_cases:
        return RunCodeResponse(status="error", results=[], message=NO_TEST_CASES)

    report = await run_tests(executor, test_cases, body.code, body.language)
    return RunCodeResponse(status="pass" if report.all_passed else "fail", results=report.results)


@router.post("/submissions", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
async def submit(
    body: RunCodeRequest,
    user: User = Depends(require_user),
    session: Session = Depends(get_session),
    executor: PistonClient = Depends(get_executor),
    connections: ConnectionManager = Depends(get_connections),
):
    problem, test_cases = await run_in_threadpool(_load_problem, session, body.problem_id)
    if not test_cases:
        raise HTTPException(status_code=400, detail=NO_TEST_CASES)

    report = await run_tests(executor, test_cases, body.code, body.language)
    if not report.all_passed:
        raise HTTPException(status_code=400, detail=ALL_MUST_PASS)

    sub = await run_in_threadpool(_save_accepted, session, user, problem, body)
    board = await run_in_threadpool(compute_leaderboard, session)
    await connections.broadcast(LEADERBOARD_UPDATED, board)
    return sub


@router.get("/submissions", response_model=List[SubmissionWithTitle])
def my_submissions(user: User = Depends(require_user), session: Session = Depends(get_session)):
    subs = session.exec(
        select(Submission, Problem.title)
        .join(Problem, Submission.problem_id == Problem.id)
        .where(Submission.user_id == user.id)
        .order_by(Submission.created_at.desc(), Submission.id.desc())
    ).all()

    return [
        SubmissionWithTitle(**sub.model_dump(), problem_title=title)
        for sub, title in subs
    ]
