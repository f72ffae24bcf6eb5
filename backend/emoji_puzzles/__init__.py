from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()

# Seed content for `flask db-reset`: (emoji_sequence, answer, hint, category, difficulty)
SYSTEM_PUZZLES = [
    ('🚗💨🏁', 'Fast and Furious', 'Street racing franchise', 'movie', 'easy'),
    ('🦁👑', 'The Lion King', 'Hakuna matata', 'movie', 'easy'),
    ('🌧️🐱🐶', "It's raining cats and dogs", 'Very heavy weather', 'phrase', 'medium'),
    ('🕷️🧑', 'Spider-Man', 'Friendly neighborhood hero', 'movie', 'easy'),
    ('🍎👁️', 'Apple of my eye', 'Someone cherished', 'phrase', 'hard'),
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    # Import and register blueprints here
    from emoji_puzzles.main import main
    flask_app.register_blueprint(main)

    from emoji_puzzles.api.puzzles import puzzles
    flask_app.register_blueprint(puzzles, url_prefix='/api/puzzles')

    # Flask-Login user loader
    from emoji_puzzles.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'You must be signed in to perform this action.', 'code': 'UNAUTHORIZED'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from emoji_puzzles.models import Puzzle
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)

            # Seed system puzzles (no owner, attemptable by anyone)
            for emoji_sequence, answer, hint, category, difficulty in SYSTEM_PUZZLES:
                db.session.add(Puzzle(
                    user_id=None,
                    emoji_sequence=emoji_sequence,
                    answer=answer,
                    hint=hint,
                    category=category,
                    difficulty=difficulty,
                    language='en',
                    is_system=True,
                ))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
