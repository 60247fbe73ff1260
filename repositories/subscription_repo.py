"""
repositories/subscription_repo.py
---------------------------------
Data access layer for subscriptions (the Record Store).
All SQL queries related to the `subscriptions` table live here.

Every write runs in a single transaction: it either commits whole or is
rolled back and surfaced as a PersistenceError.
"""

import sqlite3
from datetime import date, datetime
from typing import Optional

from db.connection import get_connection, release_connection
from models.errors import PersistenceError, SubscriptionNotFoundError
from models.subscription import Category, Currency, Subscription
from utils.logger import get_logger
from utils.validation import validate_subscription

logger = get_logger(__name__)


class SubscriptionRepository:
    """Repository for CRUD operations on the subscriptions table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, subscription: Subscription) -> Subscription:
        """
        Insert a new subscription under its caller-provided id.

        Args:
            subscription: The Subscription to persist.

        Returns:
            The same object with `created_at` populated.

        Raises:
            ValidationError: If the record breaks a field invariant.
            PersistenceError: If the write fails (including a duplicate id).
        """
        validate_subscription(subscription)
        sql = """
            INSERT INTO subscriptions
                (id, name, icon, price, currency, category, next_payment_date,
                 accent_red, accent_green, accent_blue)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
        """
        conn = get_connection()
        try:
            conn.execute(sql, (
                subscription.id, subscription.name.strip(), subscription.icon,
                subscription.price, subscription.currency.value,
                subscription.category.value, subscription.next_payment_date.isoformat(),
                subscription.accent_red, subscription.accent_green, subscription.accent_blue,
            ))
            row = conn.execute(
                "SELECT created_at FROM subscriptions WHERE id = ?;", (subscription.id,)
            ).fetchone()
            conn.commit()
            subscription.created_at = self._parse_timestamp(row["created_at"])
            logger.info(f"Added subscription '{subscription.name}' ({subscription.id})")
            return subscription
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Failed to add subscription {subscription.id}: {e}")
            raise PersistenceError("create", str(e)) from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[Subscription]:
        """
        Get every stored subscription.

        Returns:
            List of Subscription objects in insertion order.
        """
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM subscriptions ORDER BY seq ASC;").fetchall()
            return [self._row_to_subscription(r) for r in rows]
        finally:
            release_connection(conn)

    def get_by_id(self, subscription_id: str) -> Optional[Subscription]:
        """Fetch a single subscription by id, or None if it is not stored."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM subscriptions WHERE id = ?;", (subscription_id,)
            ).fetchone()
            return self._row_to_subscription(row) if row else None
        finally:
            release_connection(conn)

    def count(self) -> int:
        conn = get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM subscriptions;").fetchone()[0]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, subscription: Subscription) -> Subscription:
        """
        Replace every field of the stored record sharing `subscription.id`.

        Raises:
            ValidationError: If the record breaks a field invariant.
            SubscriptionNotFoundError: If no record has that id.
            PersistenceError: If the write fails.
        """
        validate_subscription(subscription)
        sql = """
            UPDATE subscriptions
            SET name = ?, icon = ?, price = ?, currency = ?, category = ?,
                next_payment_date = ?, accent_red = ?, accent_green = ?, accent_blue = ?
            WHERE id = ?;
        """
        conn = get_connection()
        try:
            cur = conn.execute(sql, (
                subscription.name.strip(), subscription.icon, subscription.price,
                subscription.currency.value, subscription.category.value,
                subscription.next_payment_date.isoformat(),
                subscription.accent_red, subscription.accent_green, subscription.accent_blue,
                subscription.id,
            ))
            updated = cur.rowcount > 0
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Failed to update subscription {subscription.id}: {e}")
            raise PersistenceError("update", str(e)) from e
        finally:
            release_connection(conn)

        if not updated:
            raise SubscriptionNotFoundError(subscription.id)
        logger.info(f"Updated subscription '{subscription.name}' ({subscription.id})")
        return subscription

    # ── DELETE ────────────────────────────────────────────

    def delete(self, subscription_id: str) -> bool:
        """
        Delete a subscription by id. Deleting an unknown id is not an error.

        Returns:
            True if a row was deleted, False if the id was not stored.

        Raises:
            PersistenceError: If the write fails.
        """
        conn = get_connection()
        try:
            cur = conn.execute("DELETE FROM subscriptions WHERE id = ?;", (subscription_id,))
            deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted subscription {subscription_id}")
            return deleted
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete subscription {subscription_id}: {e}")
            raise PersistenceError("delete", str(e)) from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value else None

    @classmethod
    def _row_to_subscription(cls, row: sqlite3.Row) -> Subscription:
        """Convert a database row to a Subscription domain object."""
        return Subscription(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            price=float(row["price"]),
            currency=Currency(row["currency"]),
            category=Category(row["category"]),
            next_payment_date=date.fromisoformat(row["next_payment_date"]),
            accent_red=float(row["accent_red"]),
            accent_green=float(row["accent_green"]),
            accent_blue=float(row["accent_blue"]),
            created_at=cls._parse_timestamp(row["created_at"]),
        )
