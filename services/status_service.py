"""
Room status service.

Builds the read-only composite view the frontend polls: the room, its
current round, and every member with their vote for that round.

The view is assembled from three separate queries (room, latest round,
members joined to votes) without a snapshot transaction. A concurrent
next_round between the round lookup and the vote lookup can return the
old round id together with its votes. Configure a stricter
DATABASE_ISOLATION_LEVEL if a consistent snapshot is required.
"""
from typing import Any, Dict

from sqlalchemy import and_
from sqlalchemy.orm import Session

from models import NO_VOTE, Round, User, Vote
from core.exceptions import RoundNotFound
from core.room_manager import RoomManager


def fetch_status(db: Session, room_id: int) -> Dict[str, Any]:
    """
    Return ``{"room": {...}, "users": [...]}`` for a room.

    Members without a vote in the current round get ``NO_VOTE``. Users are
    listed in membership (join) order.
    """
    room = RoomManager.get_room(db, room_id)

    current_round = (
        db.query(Round)
        .filter(Round.room_id == room_id)
        .order_by(Round.round_number.desc())
        .first()
    )
    if not current_round:
        # Rooms are always created with round 1, kept as a guard.
        raise RoundNotFound(room_id=room_id)

    rows = (
        db.query(User, Vote.vote_value)
        .outerjoin(
            Vote,
            and_(Vote.user_id == User.user_id, Vote.round_id == current_round.round_id),
        )
        .filter(User.room_id == room_id)
        .order_by(User.user_id)
        .all()
    )

    users = [
        {
            "user_id": user.user_id,
            "user_name": user.username,
            "avatar_url": user.avatar_url,
            "role": user.role,
            "vote": NO_VOTE if vote_value is None else vote_value,
        }
        for user, vote_value in rows
    ]

    return {
        "room": {
            "room_id": room.room_id,
            "room_name": room.room_name,
            "current_round_name": f"Round {current_round.round_number}",
            "current_round_id": current_round.round_id,
            "current_round_status": current_round.status.value,
        },
        "users": users,
    }
