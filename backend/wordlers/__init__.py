from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _split_origins(raw):
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [o.strip() for o in (raw or '').split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _split_origins(flask_app.config.get('CORS_ORIGINS'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One document store per app; subscriptions live on it
    from wordlers.store import DocumentStore
    flask_app.extensions['wordlers_store'] = DocumentStore(db)

    from wordlers.api.scoreboard import scoreboard
    flask_app.register_blueprint(scoreboard, url_prefix='/api')

    @flask_app.route('/')
    def index():
        return jsonify({'message': 'Welcome to the Wordlers scoreboard server!'})

    from wordlers.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the document table."""
        import wordlers.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    from wordlers.cli import scoreboard_cli
    flask_app.cli.add_command(scoreboard_cli)

    return flask_app
