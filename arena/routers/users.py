import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session, select

from arena.auth import require_admin, require_user, to_user_read
from arena.db import get_session
from arena.dependencies import get_connections
from arena.leaderboard import compute_leaderboard
from arena.models import Submission, User, utcnow
from arena.realtime import LEADERBOARD_UPDATED, ConnectionManager
from arena.schemas import ProfileUpdate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


@router.put("/profile", response_model=UserRead)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(require_user),
    session: Session = Depends(get_session),
):
    updates = body.model_dump(exclude_unset=True)
    for key, value in updates.items():
        if value is not None:
            setattr(current_user, key, value)
    current_user.updated_at = utcnow()
    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return to_user_read(current_user)


@router.get("/users", response_model=List[UserRead])
def list_users(admin: User = Depends(require_admin), session: Session = Depends(get_session)):
    users = session.exec(select(User).order_by(User.created_at.desc(), User.id.desc())).all()
    return [to_user_read(u) for u in users]


def _delete_user(session: Session, admin: User, user_id: int) -> None:
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")

    for sub in session.exec(select(Submission).where(Submission.user_id == user_id)).all():
        session.delete(sub)
    session.delete(user)
    session.commit()
    logger.info(f"User {user_id} deleted by {admin.username}")


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
    connections: ConnectionManager = Depends(get_connections),
):
    await run_in_threadpool(_delete_user, session, admin, user_id)
    board = await run_in_threadpool(compute_leaderboard, session)
    await connections.broadcast(LEADERBOARD_UPDATED, board)
