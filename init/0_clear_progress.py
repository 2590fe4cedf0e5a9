"""
Script to clear learner progress: attempts, level progress and transactions.

Balances are reset to the starting state (full lives, no XP, no diamonds).
Content and accounts are kept.
"""
import sys
from sqlmodel import Session, text
from yoruba.core.config import settings
from yoruba.core.database import engine
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def clear_progress():
    """Delete attempts, level progress and transactions, then reset user balances."""
    with Session(engine) as session:
        try:
            # Delete attempts and progress first (they reference users)
            for table in ("user_exercise", "user_level", "transaction"):
                logger.info(f"Deleting all rows from {table}...")
                session.exec(text(f'DELETE FROM "{table}"'))

            logger.info("Resetting user balances...")
            session.exec(
                text(
                    'UPDATE "user" SET xp = 0, diamonds = 0, lives = :lives, '
                    'next_life_at = NULL, current_level_id = NULL'
                ).bindparams(lives=settings.max_lives)
            )

            session.commit()
            logger.info("Successfully cleared learner progress")

        except Exception as e:
            session.rollback()
            logger.error("Error clearing progress: %s", e, exc_info=True)
            raise


if __name__ == "__main__":
    logger.info("Starting progress clearing...")
    try:
        clear_progress()
        logger.info("Successfully completed!")
    except Exception as e:
        logger.error("Error during progress clearing: %s", e, exc_info=True)
        sys.exit(1)
