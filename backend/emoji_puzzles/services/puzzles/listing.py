from typing import List, Optional, Tuple

from emoji_puzzles.models import Puzzle


def list_puzzles(
    owner_id: int,
    include_inactive: bool = False,
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Puzzle], int, int]:
    """Return one page of the caller's own puzzles, oldest first.

    System puzzles and other users' puzzles are never listed. The count is
    the size of this page, not of the whole matching collection.
    """
    query = Puzzle.query.filter(Puzzle.user_id == owner_id)
    if not include_inactive:
        query = query.filter(Puzzle.is_active.is_(True))
    if category:
        query = query.filter(Puzzle.category == category)
    if difficulty:
        query = query.filter(Puzzle.difficulty == difficulty)

    offset = (page - 1) * page_size
    items = (
        query.order_by(Puzzle.created_at.asc(), Puzzle.id.asc())
        .offset(offset)
        .limit(page_size)
        .all()
    )
    return items, len(items), page
