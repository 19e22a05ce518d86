"""Utility script to delete notifications whose expiration has passed."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone, parse_iso_datetime


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the purge."""

    parser = argparse.ArgumentParser(
        description="Delete notifications whose expiresAt is in the past.",
    )
    parser.add_argument(
        "--before",
        default=None,
        help="ISO-8601 instant used as cutoff instead of the current time.",
    )
    return parser.parse_args()


def main() -> None:
    """Purge expired notifications from the database."""

    args = parse_args()
    try:
        cutoff = parse_iso_datetime(args.before) if args.before else now_in_app_timezone()
    except ValueError as exc:
        raise SystemExit(f"Invalid --before value: {exc}") from exc

    initialize_database()

    session = SessionLocal()
    try:
        deleted = NotificationRepository(session).purge_expired(cutoff)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not purge expired notifications: {exc}") from exc
    else:
        print(f"Deleted {deleted} expired notification(s) up to {cutoff.isoformat()}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
