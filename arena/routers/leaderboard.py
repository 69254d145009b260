from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from arena.auth import require_user
from arena.db import get_session
from arena.leaderboard import LeaderboardEntry, compute_leaderboard
from arena.models import User

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("", response_model=List[LeaderboardEntry])
def leaderboard(user: User = Depends(require_user), session: Session = Depends(get_session)):
    return compute_leaderboard(session)
