"""
Script to create the tables and load the starter trails, levels, exercises
and admin account into an empty database.
"""
import sys
from sqlmodel import Session
from yoruba.core.database import engine, init_db
from yoruba.services.seed_service import seed_content
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


if __name__ == "__main__":
    logger.info("Starting content seed...")
    try:
        init_db()
        with Session(engine) as session:
            if seed_content(session):
                logger.info("Successfully completed!")
            else:
                logger.info("Nothing to do, database already seeded")
    except Exception as e:
        logger.error("Error during content seed: %s", e, exc_info=True)
        sys.exit(1)
