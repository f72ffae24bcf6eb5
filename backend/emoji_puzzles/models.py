from emoji_puzzles import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import uuid

DIFFICULTIES = ('easy', 'medium', 'hard')
SESSION_MODES = ('practice', 'timed')


def utcnow():
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }

class Puzzle(db.Model):
    __tablename__ = 'emoji_puzzle'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    # NULL owner marks a system puzzle: readable by everyone, editable by no one
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)

    emoji_sequence = db.Column(db.Text, nullable=False)
    answer = db.Column(db.Text, nullable=False)
    hint = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(64), nullable=True)
    difficulty = db.Column(db.String(16), nullable=True) # easy, medium, hard
    language = db.Column(db.String(16), nullable=True)

    is_system = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    attempts = db.relationship('PuzzleAttempt', backref='puzzle', lazy='dynamic')

    @property
    def owner_kind(self):
        return 'system' if self.user_id is None else 'user'

    def is_owned_by(self, user_id):
        return self.user_id is not None and self.user_id == user_id

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'emoji_sequence': self.emoji_sequence,
            'answer': self.answer,
            'hint': self.hint,
            'category': self.category,
            'difficulty': self.difficulty,
            'language': self.language,
            'is_system': self.is_system,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

class PuzzleSession(db.Model):
    __tablename__ = 'emoji_puzzle_session'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)

    mode = db.Column(db.String(16), nullable=True) # practice, timed
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=True)

    # Caller-reported summary, never derived from attempt rows
    total_questions = db.Column(db.Integer, nullable=True)
    correct_answers = db.Column(db.Integer, nullable=True)

    attempts = db.relationship('PuzzleAttempt', backref='session', lazy='dynamic')

    @property
    def is_ended(self):
        return self.ended_at is not None

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'mode': self.mode,
            'created_at': _iso(self.created_at),
            'ended_at': _iso(self.ended_at),
            'total_questions': self.total_questions,
            'correct_answers': self.correct_answers,
        }

class PuzzleAttempt(db.Model):
    __tablename__ = 'emoji_puzzle_attempt'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    session_id = db.Column(db.String(36), db.ForeignKey('emoji_puzzle_session.id'), nullable=True, index=True)
    puzzle_id = db.Column(db.String(36), db.ForeignKey('emoji_puzzle.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)

    guess_text = db.Column(db.Text, nullable=True)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'puzzle_id': self.puzzle_id,
            'user_id': self.user_id,
            'guess_text': self.guess_text,
            'is_correct': self.is_correct,
            'created_at': _iso(self.created_at),
        }
