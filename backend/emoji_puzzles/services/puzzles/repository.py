from typing import Optional

from flask import current_app

from emoji_puzzles import db
from emoji_puzzles.models import Puzzle, utcnow
from .errors import InvalidRequest, PuzzleNotFound

MUTABLE_FIELDS = (
    'emoji_sequence',
    'answer',
    'hint',
    'category',
    'difficulty',
    'language',
    'is_active',
)


def get_puzzle(puzzle_id: str) -> Optional[Puzzle]:
    return Puzzle.query.filter_by(id=puzzle_id).first()


def _get_owned(owner_id: int, puzzle_id: str) -> Optional[Puzzle]:
    # Ownership is plain equality: system puzzles (NULL owner) never match
    return Puzzle.query.filter_by(id=puzzle_id, user_id=owner_id).first()


def create_puzzle(owner_id: int, fields: dict) -> Puzzle:
    """Create a user-owned, active puzzle. Duplicates are allowed."""
    now = utcnow()
    puzzle = Puzzle(
        user_id=owner_id,
        emoji_sequence=fields['emoji_sequence'],
        answer=fields['answer'],
        hint=fields.get('hint'),
        category=fields.get('category'),
        difficulty=fields.get('difficulty'),
        language=fields.get('language'),
        is_system=False,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.session.add(puzzle)
    db.session.commit()
    current_app.logger.info(f"[puzzle-create] puzzle={puzzle.id} user={owner_id}")
    return puzzle


def update_puzzle(owner_id: int, puzzle_id: str, changes: dict) -> Puzzle:
    """Apply the fields present in ``changes`` to a puzzle the caller owns.

    Keys missing from ``changes`` keep their stored value. Raises
    PuzzleNotFound when the caller does not own the puzzle and
    InvalidRequest when nothing would change.
    """
    puzzle = _get_owned(owner_id, puzzle_id)
    if not puzzle:
        current_app.logger.warning(f"[puzzle-update-miss] puzzle={puzzle_id} user={owner_id}")
        raise PuzzleNotFound()

    updates = {k: changes[k] for k in MUTABLE_FIELDS if k in changes}
    if not updates:
        raise InvalidRequest('No updates provided.')

    updates['updated_at'] = utcnow()
    Puzzle.query.filter_by(id=puzzle.id, user_id=owner_id).update(updates)
    db.session.commit()
    current_app.logger.info(
        f"[puzzle-update] puzzle={puzzle.id} user={owner_id} fields={sorted(k for k in updates if k != 'updated_at')}"
    )
    return puzzle


def deactivate_puzzle(owner_id: int, puzzle_id: str) -> str:
    """Soft-delete a puzzle. An already inactive puzzle counts as missing."""
    puzzle = _get_owned(owner_id, puzzle_id)
    if not puzzle or not puzzle.is_active:
        current_app.logger.warning(f"[puzzle-deactivate-miss] puzzle={puzzle_id} user={owner_id}")
        raise PuzzleNotFound()

    changed = Puzzle.query.filter_by(id=puzzle.id, user_id=owner_id, is_active=True).update(
        {'is_active': False, 'updated_at': utcnow()}
    )
    db.session.commit()
    if not changed:
        # Lost a race with another deactivation
        raise PuzzleNotFound()
    current_app.logger.info(f"[puzzle-deactivate] puzzle={puzzle.id} user={owner_id}")
    return puzzle.id
