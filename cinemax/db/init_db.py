import logging

import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from cinemax.core.config import settings

logger = logging.getLogger(__name__)

def create_database():
    """Create the PostgreSQL database if it doesn't exist. No-op for other backends."""
    if not settings.DATABASE_URL.startswith("postgresql"):
        logger.info("Skipping database creation for non-PostgreSQL URL.")
        return

    try:
        # Connect to default 'postgres' database to check/create target DB
        con = psycopg2.connect(
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            host=settings.POSTGRES_SERVER,
            port=settings.POSTGRES_PORT,
            dbname="postgres"
        )
        con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        cur = con.cursor()

        cur.execute(
            "SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s",
            (settings.POSTGRES_DB,),
        )
        exists = cur.fetchone()

        if not exists:
            logger.info("Database %s does not exist. Creating...", settings.POSTGRES_DB)
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(settings.POSTGRES_DB)))
            logger.info("Database %s created successfully.", settings.POSTGRES_DB)
        else:
            logger.info("Database %s already exists.", settings.POSTGRES_DB)

        cur.close()
        con.close()
    except psycopg2.Error as e:
        # The URL may point straight at an existing database we can't administer
        logger.error("Error creating database: %s", e)

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    create_database()
