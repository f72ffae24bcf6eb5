from typing import Optional

from flask import current_app

from emoji_puzzles import db
from emoji_puzzles.models import PuzzleAttempt, utcnow
from .errors import PuzzleForbidden, PuzzleNotFound, SessionNotFound
from .normalize import answers_match
from .repository import get_puzzle
from .sessions import get_owned_session


def submit_attempt(user_id: int, puzzle_id: str, guess_text: str, session_id: Optional[str] = None) -> PuzzleAttempt:
    """Score a guess and record it as a new attempt.

    System puzzles are open to everyone, user puzzles only to their owner.
    Inactive puzzles look missing to every caller. A session, when given,
    must belong to the guesser; an ended session is still accepted. Session
    tallies are left alone.
    """
    puzzle = get_puzzle(puzzle_id)
    if not puzzle or not puzzle.is_active:
        current_app.logger.warning(f"[attempt-miss] puzzle={puzzle_id} user={user_id}")
        raise PuzzleNotFound()

    if puzzle.owner_kind == 'user' and not puzzle.is_owned_by(user_id):
        current_app.logger.warning(f"[attempt-forbidden] puzzle={puzzle.id} user={user_id} owner={puzzle.user_id}")
        raise PuzzleForbidden()

    resolved_session_id = None
    if session_id:
        session = get_owned_session(user_id, session_id)
        if not session:
            current_app.logger.warning(f"[attempt-session-miss] session={session_id} user={user_id}")
            raise SessionNotFound()
        if session.is_ended:
            current_app.logger.info(f"[attempt-late] session={session.id} user={user_id} ended_at={session.ended_at}")
        resolved_session_id = session.id

    attempt = PuzzleAttempt(
        session_id=resolved_session_id,
        puzzle_id=puzzle.id,
        user_id=user_id,
        guess_text=guess_text,
        is_correct=answers_match(guess_text, puzzle.answer),
        created_at=utcnow(),
    )
    db.session.add(attempt)
    db.session.commit()
    current_app.logger.info(
        f"[attempt] attempt={attempt.id} puzzle={puzzle.id} user={user_id} session={resolved_session_id} correct={attempt.is_correct}"
    )
    return attempt
