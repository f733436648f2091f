"""
Leaderboard Service - round scores for the main and Legion standings

Responsibilities:
- Round registry (list rounds, fetch one round)
- Upsert a round's main and Legion score maps
- Aggregate totals across all rounds into ranked leaderboards
"""
