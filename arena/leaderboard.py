from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import Session, select, func

from arena.models import User, Submission


class LeaderboardEntry(BaseModel):
    user_id: int
    username: str
    display_name: str
    profile_image_url: Optional[str] = None
    total_score: int
    problems_solved: int
    rank: int


def compute_leaderboard(session: Session) -> List[LeaderboardEntry]:
    # best accepted score per (user, problem)
    best = (
        select(
            Submission.user_id,
            Submission.problem_id,
            func.max(Submission.score).label("best_score"),
        )
        .where(Submission.status == "pass")
        .group_by(Submission.user_id, Submission.problem_id)
        .subquery()
    )

    total_score = func.coalesce(func.sum(best.c.best_score), 0)
    problems_solved = func.count(best.c.problem_id)

    # every non-admin user appears, zero if nothing solved
    rows = session.exec(
        select(
            User.id,
            User.username,
            User.display_name,
            User.profile_image_url,
            total_score.label("total_score"),
            problems_solved.label("problems_solved"),
        )
        .outerjoin(best, best.c.user_id == User.id)
        .where(User.is_admin == False)
        .group_by(User.id, User.username, User.display_name, User.profile_image_url)
        .order_by(total_score.desc(), problems_solved.desc(), User.id.asc())
    ).all()

    return [
        LeaderboardEntry(
            user_id=row.id,
            username=row.username,
            display_name=row.display_name,
            profile_image_url=row.profile_image_url,
            total_score=int(row.total_score or 0),
            problems_solved=int(row.problems_solved or 0),
            rank=position,
        )
        for position, row in enumerate(rows, start=1)
    ]
