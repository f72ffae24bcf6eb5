"""Puzzle domain services: normalization, puzzles, sessions and attempts.

Routes import from here and pass in the already-authenticated user id and
shape-checked input; nothing in this package touches the request.
"""

from .errors import (
    PuzzleServiceError,
    InvalidRequest,
    NotFound,
    PuzzleNotFound,
    SessionNotFound,
    PuzzleForbidden,
)
from .normalize import normalize_answer, answers_match
from .repository import MUTABLE_FIELDS, get_puzzle, create_puzzle, update_puzzle, deactivate_puzzle
from .listing import list_puzzles
from .sessions import get_owned_session, start_session, end_session
from .attempts import submit_attempt

__all__ = [
    "PuzzleServiceError",
    "InvalidRequest",
    "NotFound",
    "PuzzleNotFound",
    "SessionNotFound",
    "PuzzleForbidden",
    "normalize_answer",
    "answers_match",
    "MUTABLE_FIELDS",
    "get_puzzle",
    "create_puzzle",
    "update_puzzle",
    "deactivate_puzzle",
    "list_puzzles",
    "get_owned_session",
    "start_session",
    "end_session",
    "submit_attempt",
]
