import os
import re
from flask import Flask, request, jsonify
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .aggregation import compute_totals
from .config import config
from .errors import LeaderboardError, NotFound, StoreUnavailable, ValidationFailure, WriteFailed
from .models import db
from .round_store import RoundStore
from .scores import is_valid_round, parse_round_number, validate_score_map

# Plain ASCII decimal, optional minus sign
ROUND_SEGMENT = re.compile(r"-?[0-9]+")


def create_app(config_name: str = None) -> Flask:
    """Application factory for the leaderboard service."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'default')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))
    # Success messages are Georgian; keep them readable in the JSON body
    app.json.ensure_ascii = False

    # Picks up CORS_ORIGINS, CORS_METHODS and CORS_SUPPORTS_CREDENTIALS from config
    CORS(app)

    # Initialize extensions
    db.init_app(app)

    # Create tables; an unreachable database must not take the function down
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("Database connected")
        except SQLAlchemyError as e:
            app.logger.error(f"Database connection error: {e}")

    # Store services on app for access in routes
    app.round_store = RoundStore(db.session)

    register_api_routes(app)
    register_error_handlers(app)

    return app


def _error_response(message: str, error: LeaderboardError):
    return jsonify({
        'message': message,
        'error': error.detail if error.detail is not None else str(error)
    }), error.status_code


def register_api_routes(app: Flask):
    """Register API routes."""

    # ==================== Rounds ====================

    @app.route('/rounds', methods=['GET'])
    def api_list_rounds():
        """List every round number that has results."""
        try:
            rounds = app.round_store.list_rounds()
        except StoreUnavailable as e:
            return _error_response('Error fetching rounds', e)

        return jsonify(rounds)

    @app.route('/round/<round_number>', methods=['GET'])
    def api_get_round(round_number: str):
        """Get the raw score maps of a single round."""
        # Anything that is not a storable round number cannot match a round
        if not ROUND_SEGMENT.fullmatch(round_number):
            return jsonify({'message': 'Round not found'}), 404
        number = int(round_number)
        if not is_valid_round(number):
            return jsonify({'message': 'Round not found'}), 404

        try:
            record = app.round_store.get_round(number)
        except NotFound as e:
            return jsonify(e.to_dict()), 404
        except StoreUnavailable as e:
            return _error_response('Error fetching round', e)

        return jsonify(record.to_dict())

    @app.route('/round', methods=['POST'])
    def api_upsert_round():
        """Insert a round or replace its results."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationFailure("Invalid round payload", "request body must be a JSON object")

        round_number = parse_round_number(data.get('round'))
        main_results = validate_score_map(data.get('mainresults'), 'mainresults')
        legion_results = validate_score_map(data.get('Legion'), 'Legion')

        try:
            created = app.round_store.upsert(round_number, main_results, legion_results)
        except WriteFailed as e:
            return _error_response('შეცდომა', e)

        if created:
            return jsonify({'message': f'ტური {round_number} წარმატებით დაემატა'}), 201
        return jsonify({'message': f'ტური {round_number} წარმატებით განახლდა'})

    # ==================== Leaderboards ====================

    @app.route('/totals', methods=['GET'])
    def api_totals():
        """Ranked main and Legion totals across all rounds."""
        try:
            records = app.round_store.find_all()
        except StoreUnavailable as e:
            return _error_response('Error calculating totals', e)

        return jsonify(compute_totals(records).to_dict())

    # ==================== Health Check ====================

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        db_ok = app.round_store.ping()

        status = 'healthy' if db_ok else 'unhealthy'
        code = 200 if db_ok else 503

        return jsonify({
            'status': status,
            'database': 'connected' if db_ok else 'disconnected'
        }), code


def register_error_handlers(app: Flask):
    """Render every error as JSON."""

    @app.errorhandler(LeaderboardError)
    def handle_leaderboard_error(e: LeaderboardError):
        app.logger.warning(f"{request.method} {request.path} failed: {e}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({'message': e.name}), e.code
