from datetime import datetime, timedelta

import pytest

from emoji_puzzles import db
from emoji_puzzles.models import Puzzle, PuzzleSession, PuzzleAttempt
from emoji_puzzles.services.puzzles import (
    InvalidRequest,
    NotFound,
    PuzzleForbidden,
    PuzzleNotFound,
    SessionNotFound,
    create_puzzle,
    update_puzzle,
    deactivate_puzzle,
    list_puzzles,
    start_session,
    end_session,
    submit_attempt,
)


def _make_puzzle(owner_id, **overrides):
    fields = {'emoji_sequence': '🚗💨🏁', 'answer': 'Fast and Furious'}
    fields.update(overrides)
    return create_puzzle(owner_id, fields)


def test_create_sets_ownership_and_flags(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id, hint='Cars', difficulty='easy')
    assert puzzle.user_id == alice_id
    assert puzzle.owner_kind == 'user'
    assert puzzle.is_system is False
    assert puzzle.is_active is True
    assert puzzle.created_at == puzzle.updated_at
    # Answer is stored verbatim, never pre-normalized
    assert puzzle.answer == 'Fast and Furious'


def test_duplicates_are_allowed(users):
    alice_id, _ = users
    first = _make_puzzle(alice_id)
    second = _make_puzzle(alice_id)
    assert first.id != second.id


def test_update_applies_only_present_fields(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id, hint='Cars', category='movie')
    before = puzzle.updated_at
    updated = update_puzzle(alice_id, puzzle.id, {'hint': 'Vroom'})
    assert updated.hint == 'Vroom'
    assert updated.category == 'movie'
    assert updated.answer == 'Fast and Furious'
    assert updated.updated_at >= before


def test_update_with_no_fields_is_invalid(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id)
    with pytest.raises(InvalidRequest):
        update_puzzle(alice_id, puzzle.id, {})
    # Unknown keys do not count as updates
    with pytest.raises(InvalidRequest):
        update_puzzle(alice_id, puzzle.id, {'user_id': 999})


def test_update_and_deactivate_require_ownership(users, system_puzzle_id):
    alice_id, bob_id = users
    puzzle = _make_puzzle(alice_id)
    with pytest.raises(PuzzleNotFound):
        update_puzzle(bob_id, puzzle.id, {'hint': 'mine now'})
    with pytest.raises(PuzzleNotFound):
        deactivate_puzzle(bob_id, puzzle.id)
    # System puzzles are editable by nobody
    for user_id in (alice_id, bob_id):
        with pytest.raises(PuzzleNotFound):
            update_puzzle(user_id, system_puzzle_id, {'hint': 'x'})
        with pytest.raises(PuzzleNotFound):
            deactivate_puzzle(user_id, system_puzzle_id)
    assert db.session.get(Puzzle, puzzle.id).hint is None


def test_deactivate_twice_reports_not_found(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id)
    assert deactivate_puzzle(alice_id, puzzle.id) == puzzle.id
    assert db.session.get(Puzzle, puzzle.id).is_active is False
    with pytest.raises(NotFound):
        deactivate_puzzle(alice_id, puzzle.id)


def test_owner_can_reactivate_through_update(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id)
    deactivate_puzzle(alice_id, puzzle.id)
    assert update_puzzle(alice_id, puzzle.id, {'is_active': True}).is_active is True


def test_listing_scopes_and_filters(users, system_puzzle_id):
    alice_id, bob_id = users
    movie = _make_puzzle(alice_id, category='movie', difficulty='easy')
    song = _make_puzzle(alice_id, category='song', difficulty='hard')
    hidden = _make_puzzle(alice_id, category='movie', difficulty='easy')
    _make_puzzle(bob_id, category='movie')
    deactivate_puzzle(alice_id, hidden.id)

    items, count, page = list_puzzles(alice_id)
    assert {p.id for p in items} == {movie.id, song.id}
    assert count == 2 and page == 1
    assert all(p.is_active for p in items)
    assert system_puzzle_id not in {p.id for p in items}

    items, _, _ = list_puzzles(alice_id, include_inactive=True)
    assert {p.id for p in items} == {movie.id, song.id, hidden.id}

    items, _, _ = list_puzzles(alice_id, category='movie')
    assert [p.id for p in items] == [movie.id]

    items, _, _ = list_puzzles(alice_id, difficulty='hard')
    assert [p.id for p in items] == [song.id]


def test_listing_pages_oldest_first(users):
    alice_id, _ = users
    base = datetime(2024, 1, 1, 12, 0, 0)
    created = []
    # Insert out of order to make sure ordering comes from created_at
    for offset in (2, 0, 1):
        puzzle = _make_puzzle(alice_id, answer=f'answer {offset}')
        Puzzle.query.filter_by(id=puzzle.id).update({'created_at': base + timedelta(minutes=offset)})
        db.session.commit()
        created.append((offset, puzzle.id))
    by_age = [pid for _, pid in sorted(created)]

    items, count, page = list_puzzles(alice_id, page=2, page_size=1)
    assert count == 1 and page == 2
    assert items[0].id == by_age[1]

    items, count, _ = list_puzzles(alice_id, page=1, page_size=2)
    assert [p.id for p in items] == by_age[:2]

    # count is the page size actually returned, not the collection total
    items, count, _ = list_puzzles(alice_id, page=2, page_size=2)
    assert count == 1
    items, count, _ = list_puzzles(alice_id, page=5, page_size=2)
    assert items == [] and count == 0


def test_session_start_defaults(users):
    alice_id, _ = users
    session = start_session(alice_id, mode='timed', total_questions=10)
    assert session.user_id == alice_id
    assert session.ended_at is None
    assert session.correct_answers is None
    assert session.total_questions == 10


def test_end_session_rejects_correct_above_total(users):
    alice_id, _ = users
    session = start_session(alice_id)
    with pytest.raises(InvalidRequest):
        end_session(alice_id, session.id, total_questions=5, correct_answers=6)
    stored = db.session.get(PuzzleSession, session.id)
    assert stored.ended_at is None
    assert stored.total_questions is None
    assert stored.correct_answers is None


def test_end_session_checks_supplied_count_against_stored_one(users):
    alice_id, _ = users
    session = start_session(alice_id, total_questions=5)
    with pytest.raises(InvalidRequest):
        end_session(alice_id, session.id, correct_answers=6)
    stored = db.session.get(PuzzleSession, session.id)
    assert stored.ended_at is None
    assert stored.total_questions == 5
    assert stored.correct_answers is None

    end_session(alice_id, session.id, correct_answers=5)
    # Lowering the total below the stored correct count is rejected as well
    with pytest.raises(InvalidRequest):
        end_session(alice_id, session.id, total_questions=4)
    stored = db.session.get(PuzzleSession, session.id)
    assert (stored.total_questions, stored.correct_answers) == (5, 5)


def test_end_session_preserves_unsupplied_counts(users):
    alice_id, _ = users
    session = start_session(alice_id, total_questions=8)
    end_session(alice_id, session.id, correct_answers=3)
    stored = db.session.get(PuzzleSession, session.id)
    assert stored.total_questions == 8
    assert stored.correct_answers == 3
    first_end = stored.ended_at
    assert first_end is not None

    # Ending again is allowed and never moves ended_at backwards
    end_session(alice_id, session.id, total_questions=9)
    stored = db.session.get(PuzzleSession, session.id)
    assert stored.ended_at >= first_end
    assert stored.total_questions == 9
    assert stored.correct_answers == 3


def test_end_session_requires_ownership(users):
    alice_id, bob_id = users
    session = start_session(alice_id)
    with pytest.raises(SessionNotFound):
        end_session(bob_id, session.id)
    with pytest.raises(SessionNotFound):
        end_session(alice_id, 'no-such-session')


def test_submit_scores_with_normalized_match(users):
    alice_id, _ = users
    puzzle = _make_puzzle(alice_id)
    right = submit_attempt(alice_id, puzzle.id, 'fast&furious')
    wrong = submit_attempt(alice_id, puzzle.id, 'Furious 7')
    assert right.is_correct is True
    assert wrong.is_correct is False
    assert right.guess_text == 'fast&furious'
    assert right.session_id is None
    assert puzzle.attempts.count() == 2


def test_submit_rules_for_visibility(users, system_puzzle_id):
    alice_id, bob_id = users
    puzzle = _make_puzzle(alice_id)
    with pytest.raises(PuzzleForbidden):
        submit_attempt(bob_id, puzzle.id, 'fast and furious')
    # System puzzles are open to everybody
    assert submit_attempt(bob_id, system_puzzle_id, 'the lion king').is_correct is True
    # Inactive puzzles are invisible, even to the owner
    deactivate_puzzle(alice_id, puzzle.id)
    with pytest.raises(PuzzleNotFound):
        submit_attempt(alice_id, puzzle.id, 'fast and furious')
    with pytest.raises(PuzzleNotFound):
        submit_attempt(alice_id, 'missing', 'anything')


def test_submit_with_session(users, system_puzzle_id):
    alice_id, bob_id = users
    session = start_session(alice_id, mode='practice', total_questions=3)
    attempt = submit_attempt(alice_id, system_puzzle_id, 'Lion King', session_id=session.id)
    assert attempt.session_id == session.id
    assert attempt.is_correct is False

    with pytest.raises(SessionNotFound):
        submit_attempt(bob_id, system_puzzle_id, 'The Lion King', session_id=session.id)

    # Tallies are caller-reported; attempts never touch them
    stored = db.session.get(PuzzleSession, session.id)
    assert stored.correct_answers is None

    # Ended sessions still accept attempts
    end_session(alice_id, session.id, correct_answers=0)
    late = submit_attempt(alice_id, system_puzzle_id, 'the lion king!', session_id=session.id)
    assert late.is_correct is True
    assert stored.attempts.count() == 2
    assert PuzzleAttempt.query.filter_by(user_id=alice_id).count() == 2
