from typing import Optional

from flask import current_app

from emoji_puzzles import db
from emoji_puzzles.models import PuzzleSession, utcnow
from .errors import InvalidRequest, SessionNotFound


def get_owned_session(owner_id: int, session_id: str) -> Optional[PuzzleSession]:
    return PuzzleSession.query.filter_by(id=session_id, user_id=owner_id).first()


def start_session(owner_id: int, mode: Optional[str] = None, total_questions: Optional[int] = None) -> PuzzleSession:
    session = PuzzleSession(
        user_id=owner_id,
        mode=mode,
        created_at=utcnow(),
        ended_at=None,
        total_questions=total_questions,
        correct_answers=None,
    )
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(f"[session-start] session={session.id} user={owner_id} mode={mode}")
    return session


def end_session(
    owner_id: int,
    session_id: str,
    total_questions: Optional[int] = None,
    correct_answers: Optional[int] = None,
) -> str:
    """Finalize a session with caller-reported tallies.

    - Counts left as None keep their stored value
    - Rejects a resulting correct count above the total before writing anything
    - Ending twice is allowed; ended_at is re-stamped but never moves back
    """
    session = get_owned_session(owner_id, session_id)
    if not session:
        current_app.logger.warning(f"[session-end-miss] session={session_id} user={owner_id}")
        raise SessionNotFound()

    total = total_questions if total_questions is not None else session.total_questions
    correct = correct_answers if correct_answers is not None else session.correct_answers
    # A count left out falls back to the stored one before comparing
    if total is not None and correct is not None and correct > total:
        current_app.logger.warning(f"[session-end-invalid] session={session.id} user={owner_id} total={total} correct={correct}")
        raise InvalidRequest('Correct answers cannot exceed total questions.')

    now = utcnow()
    ended_at = max(now, session.ended_at) if session.ended_at else now
    PuzzleSession.query.filter_by(id=session.id, user_id=owner_id).update({
        'ended_at': ended_at,
        'total_questions': total,
        'correct_answers': correct,
    })
    db.session.commit()
    current_app.logger.info(
        f"[session-end] session={session.id} user={owner_id} total={total} correct={correct}"
    )
    return session.id
