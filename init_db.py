"""
Create the database tables.

Used by ``flask init-db``; can also be run directly::

    python init_db.py [config-name]
"""
import sys

from extensions import db


def create_tables():
    """Create every table that does not exist yet; return all table names."""
    db.create_all()
    return [table.name for table in db.metadata.sorted_tables]


if __name__ == '__main__':
    from app import create_app

    app = create_app(sys.argv[1] if len(sys.argv) > 1 else None)
    with app.app_context():
        tables = create_tables()
        print(f"Database location: {app.config['SQLALCHEMY_DATABASE_URI']}")
        print('Tables:')
        for name in tables:
            print(f'  - {name}')
