#!/usr/bin/env python3
"""
Create the badge request tables.
Run this once against a fresh database (or use `flask db upgrade`).
"""

import sys
sys.path.insert(0, ".")

from badge_request import create_app, db


def init_db():
    app = create_app()

    with app.app_context():
        print("Creating tables...")

        try:
            db.create_all()
            for table in sorted(db.metadata.tables):
                print(f"  {table}")
            print("Done! Tables created successfully.")
        except Exception as e:
            print(f"Error: {e}")
            db.session.rollback()
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(init_db())
