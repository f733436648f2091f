"""
Pytest configuration and fixtures for leaderboard tests.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from leaderboard.app import create_app
from leaderboard.models import db, RoundResult


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')
    
    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        # Clear all tables before each test
        db.session.remove()
        
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        
        yield db.session
        
        db.session.rollback()


@pytest.fixture
def round_store(app, db_session):
    """The store wired into the application."""
    return app.round_store


@pytest.fixture
def sample_rounds(app, db_session):
    """Two rounds with overlapping teams."""
    with app.app_context():
        rounds = [
            RoundResult(
                round=1,
                main_results={'A': 10, 'B': 5},
                legion_results={'X': 3}
            ),
            RoundResult(
                round=2,
                main_results={'A': 7, 'B': 8},
                legion_results={'X': 1, 'Y': 2}
            ),
        ]
        for r in rounds:
            db.session.add(r)
        db.session.commit()
        
        for r in rounds:
            db.session.refresh(r)
        
        return rounds
