from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class RoundResult(db.Model):
    __tablename__ = 'round_results'
    
    id = db.Column(db.Integer, primary_key=True)
    round = db.Column(db.Integer, unique=True, nullable=False, index=True)
    
    # team name -> score, one map per leaderboard
    main_results = db.Column(db.JSON, nullable=False, default=dict)
    legion_results = db.Column(db.JSON, nullable=False, default=dict)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_dict(self):
        # Field names match the request body of POST /round
        return {
            'round': self.round,
            'mainresults': self.main_results or {},
            'Legion': self.legion_results or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
    
    def __repr__(self):
        return f"<RoundResult round={self.round}>"
