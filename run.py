#!/usr/bin/env python3
"""
Entry point for running the Leaderboard API locally.

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development or production (default: development)
    PORT: Port to run on (default: 5000)
    DATABASE_URL: Database connection string
"""
import os

from leaderboard.app import create_app


def run_api():
    """Run the leaderboard API with the Flask development server."""
    env = os.getenv('FLASK_ENV', 'development')
    app = create_app(env)
    port = int(os.getenv('PORT', 5000))
    
    print(f"Starting Leaderboard API on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=env == 'development')


if __name__ == '__main__':
    run_api()
