from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from emoji_puzzles.models import DIFFICULTIES, SESSION_MODES
from emoji_puzzles.services.puzzles import (
    PuzzleServiceError,
    InvalidRequest,
    create_puzzle as svc_create_puzzle,
    update_puzzle as svc_update_puzzle,
    deactivate_puzzle as svc_deactivate_puzzle,
    list_puzzles as svc_list_puzzles,
    start_session as svc_start_session,
    end_session as svc_end_session,
    submit_attempt as svc_submit_attempt,
)


puzzles = Blueprint('puzzles', __name__)

# Sentinel for "key not present in the request"; None means an explicit null
_MISSING = object()


@puzzles.errorhandler(PuzzleServiceError)
def handle_service_error(exc):
    return jsonify(exc.to_dict()), exc.status_code


# Input shape checks. These run before any service call so malformed
# input never reaches the database.

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequest('Request body must be a JSON object.')
    return data

def _text(data: dict, key: str, required: bool = False, allow_empty: bool = True):
    if key not in data:
        if required:
            raise InvalidRequest(f'{key} is required.')
        return _MISSING
    value = data[key]
    if not isinstance(value, str):
        raise InvalidRequest(f'{key} must be a string.')
    if not allow_empty and not value:
        raise InvalidRequest(f'{key} must not be empty.')
    return value

def _choice(data: dict, key: str, choices):
    if key not in data:
        return _MISSING
    value = data[key]
    if value not in choices:
        raise InvalidRequest(f"{key} must be one of: {', '.join(choices)}.")
    return value

def _boolean(data: dict, key: str):
    if key not in data:
        return _MISSING
    value = data[key]
    if not isinstance(value, bool):
        raise InvalidRequest(f'{key} must be a boolean.')
    return value

def _integer(data: dict, key: str, minimum: int):
    if key not in data:
        return _MISSING
    value = data[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(f'{key} must be an integer.')
    if value < minimum:
        raise InvalidRequest(f'{key} must be at least {minimum}.')
    return value

def _present(**values) -> dict:
    return {k: v for k, v in values.items() if v is not _MISSING}

def _or_none(value):
    return None if value is _MISSING else value

def _query_int(name: str, default: int, minimum: int, maximum=None) -> int:
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidRequest(f'{name} must be an integer.')
    if value < minimum or (maximum is not None and value > maximum):
        bound = f'between {minimum} and {maximum}' if maximum is not None else f'at least {minimum}'
        raise InvalidRequest(f'{name} must be {bound}.')
    return value

def _query_bool(name: str) -> bool:
    raw = request.args.get(name)
    if raw is None or raw == '':
        return False
    lowered = raw.lower()
    if lowered in ('true', '1'):
        return True
    if lowered in ('false', '0'):
        return False
    raise InvalidRequest(f'{name} must be true or false.')


@puzzles.route('', methods=['POST'])
@login_required
def create_puzzle():
    data = _json_body()
    fields = _present(
        emoji_sequence=_text(data, 'emoji_sequence', required=True, allow_empty=False),
        answer=_text(data, 'answer', required=True, allow_empty=False),
        hint=_text(data, 'hint'),
        category=_text(data, 'category'),
        difficulty=_choice(data, 'difficulty', DIFFICULTIES),
        language=_text(data, 'language'),
    )
    puzzle = svc_create_puzzle(current_user.id, fields)
    return jsonify({'puzzle': puzzle.to_dict()}), 201


@puzzles.route('/<string:puzzle_id>', methods=['PATCH'])
@login_required
def update_puzzle(puzzle_id):
    data = _json_body()
    changes = _present(
        emoji_sequence=_text(data, 'emoji_sequence', allow_empty=False),
        answer=_text(data, 'answer', allow_empty=False),
        hint=_text(data, 'hint'),
        category=_text(data, 'category'),
        difficulty=_choice(data, 'difficulty', DIFFICULTIES),
        language=_text(data, 'language'),
        is_active=_boolean(data, 'is_active'),
    )
    puzzle = svc_update_puzzle(current_user.id, puzzle_id, changes)
    return jsonify({'puzzle': puzzle.to_dict()})


@puzzles.route('/<string:puzzle_id>/deactivate', methods=['POST'])
@login_required
def deactivate_puzzle(puzzle_id):
    deactivated_id = svc_deactivate_puzzle(current_user.id, puzzle_id)
    return jsonify({'id': deactivated_id})


@puzzles.route('/mine', methods=['GET'])
@login_required
def list_my_puzzles():
    cfg = current_app.config
    difficulty = request.args.get('difficulty') or None
    if difficulty is not None and difficulty not in DIFFICULTIES:
        raise InvalidRequest(f"difficulty must be one of: {', '.join(DIFFICULTIES)}.")
    page = _query_int('page', default=1, minimum=1)
    page_size = _query_int(
        'page_size',
        default=int(cfg.get('PUZZLE_PAGE_SIZE_DEFAULT', 20)),
        minimum=1,
        maximum=int(cfg.get('PUZZLE_PAGE_SIZE_MAX', 100)),
    )
    items, count, page = svc_list_puzzles(
        current_user.id,
        include_inactive=_query_bool('include_inactive'),
        category=request.args.get('category') or None,
        difficulty=difficulty,
        page=page,
        page_size=page_size,
    )
    return jsonify({
        'items': [p.to_dict() for p in items],
        'count': count,
        'page': page,
    })


@puzzles.route('/sessions', methods=['POST'])
@login_required
def start_session():
    data = _json_body()
    session = svc_start_session(
        current_user.id,
        mode=_or_none(_choice(data, 'mode', SESSION_MODES)),
        total_questions=_or_none(_integer(data, 'total_questions', minimum=1)),
    )
    return jsonify({'session': session.to_dict()}), 201


@puzzles.route('/sessions/<string:session_id>/end', methods=['POST'])
@login_required
def end_session(session_id):
    data = _json_body()
    ended_id = svc_end_session(
        current_user.id,
        session_id,
        total_questions=_or_none(_integer(data, 'total_questions', minimum=0)),
        correct_answers=_or_none(_integer(data, 'correct_answers', minimum=0)),
    )
    return jsonify({'id': ended_id})


@puzzles.route('/<string:puzzle_id>/attempts', methods=['POST'])
@login_required
def submit_attempt(puzzle_id):
    data = _json_body()
    guess_text = _text(data, 'guess_text', required=True, allow_empty=False)
    # An empty session id means untracked play
    session_id = _or_none(_text(data, 'session_id')) or None
    attempt = svc_submit_attempt(current_user.id, puzzle_id, guess_text, session_id=session_id)
    return jsonify({'attempt': attempt.to_dict()}), 201
