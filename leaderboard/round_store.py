import logging
from typing import List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import NotFound, StoreUnavailable, WriteFailed
from .models import db, RoundResult
from .scores import ScoreMap

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
CONFLICT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


class RoundStore:
    """
    Persistence for round results.
    
    Holds the session handle by reference; the engine behind it is created
    once per application and reused by every request.
    """
    
    def __init__(self, session: Session = None):
        self.session = session if session is not None else db.session
    
    def find_all(self) -> List[RoundResult]:
        """Every stored round, ordered by round number."""
        try:
            result = self.session.execute(select(RoundResult).order_by(RoundResult.round))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to load rounds: {e}")
            raise StoreUnavailable("Error reading rounds", str(e)) from e
    
    def list_rounds(self) -> List[int]:
        try:
            result = self.session.execute(select(RoundResult.round).order_by(RoundResult.round))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list round numbers: {e}")
            raise StoreUnavailable("Error reading rounds", str(e)) from e
    
    def find_by_round(self, round_number: int) -> Optional[RoundResult]:
        try:
            result = self.session.execute(
                select(RoundResult).where(RoundResult.round == round_number)
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load round {round_number}: {e}")
            raise StoreUnavailable("Error reading round", str(e)) from e
    
    def get_round(self, round_number: int) -> RoundResult:
        """Like find_by_round but raises NotFound when the round does not exist."""
        record = self.find_by_round(round_number)
        if record is None:
            raise NotFound("Round not found")
        return record
    
    def upsert(self, round_number: int, main_results: ScoreMap, legion_results: ScoreMap) -> bool:
        """
        Create the round or replace both of its score maps.
        
        The unique constraint on ``round`` decides which writer creates the
        row; a writer that loses the insert falls through to the update, so
        concurrent upserts give exactly one row and the last update wins.
        
        Returns:
            True if the round was created, False if it was updated
        """
        values = {
            'round': round_number,
            'main_results': dict(main_results),
            'legion_results': dict(legion_results),
        }
        try:
            created = self._insert_if_absent(values)
            if not created:
                self.session.execute(
                    update(RoundResult)
                    .where(RoundResult.round == round_number)
                    .values(main_results=values['main_results'],
                            legion_results=values['legion_results'])
                )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to save round {round_number}: {e}")
            raise WriteFailed("Error saving round", str(e)) from e
        
        logger.info(f"Round {round_number} {'created' if created else 'updated'}")
        return created
    
    def _insert_if_absent(self, values: dict) -> bool:
        dialect = self.session.get_bind().dialect.name
        conflict_insert = CONFLICT_INSERTS.get(dialect)
        
        if conflict_insert is not None:
            stmt = conflict_insert(RoundResult).values(**values).on_conflict_do_nothing(
                index_elements=['round']
            )
            return self.session.execute(stmt).rowcount == 1
        
        try:
            with self.session.begin_nested():
                self.session.execute(insert(RoundResult).values(**values))
        except IntegrityError:
            return False
        return True
    
    def ping(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            self.session.execute(select(1))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            self.session.rollback()
            return False
