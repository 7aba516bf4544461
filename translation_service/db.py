import logging
import sqlite3

from flask_migrate import Migrate, stamp
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event, inspect

from translation_service.constants import ALEMBIC_DIR

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()
migrate = Migrate(directory=ALEMBIC_DIR)


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Cascading deletes on the association table need foreign keys enabled on SQLite"""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.execute("PRAGMA busy_timeout=30000;")
    cursor.close()


def init_db(app, stamp_migrations=True):
    with app.app_context():
        event.listen(db.engine, "connect", set_sqlite_pragma)

        inspector = inspect(db.engine)
        if not inspector.has_table("translations"):
            logger.info("Initializing database tables...")
            db.create_all()
            if stamp_migrations:
                stamp(directory=ALEMBIC_DIR)
                logger.info("Database created and stamped to the latest migration version.")
        else:
            # Ensure new tables are created even if DB exists
            db.create_all()


def check_db_connection():
    """Return (ok, error) after a trivial round trip to the database."""
    try:
        with db.engine.connect() as connection:
            connection.exec_driver_sql("SELECT 1")
        return True, None
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False, str(e)
