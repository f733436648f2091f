"""
Serverless entry point.

The Python runtime imports this module once per execution context and
serves the module-level ``app``. Building the app here means the database
engine and its pool are created once and reused by every warm invocation.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from leaderboard.app import create_app

app = create_app(os.getenv('FLASK_ENV', 'production'))
