# manage.py
import sys

from sqlalchemy.engine import make_url

from app import create_app
from songlib.database.db_manager import db

USAGE = "Usage: python manage.py create_db"


def create_db(test_config=None) -> str:
    """Create every table for the configured database; returns the database URI."""
    app = create_app(test_config)
    with app.app_context():
        db_uri = app.config['SQLALCHEMY_DATABASE_URI']
        # initialize_database already created missing tables; repeat for an explicit run
        db.create_all()
        print(f"Database tables created for {make_url(db_uri).render_as_string(hide_password=True)}")
    return db_uri


def main(argv) -> int:
    if len(argv) < 2:
        print(f"No command provided. {USAGE}")
        return 1
    command = argv[1]
    if command == 'create_db':
        create_db()
        return 0
    print(f"Unknown command: {command}")
    print(USAGE)
    return 1


if __name__ == '__main__':
    sys.exit(main(sys.argv))
