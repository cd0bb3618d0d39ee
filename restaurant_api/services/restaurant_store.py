"""SQLite-backed storage for restaurant records."""

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from restaurant_api.models import Restaurant, RestaurantPayload

logger = logging.getLogger(__name__)

COLUMNS = ("id", "name", "stars", "address", "chef", "state", "website", "info")
SELECT_COLUMNS = ", ".join(COLUMNS)
OPTIONAL_COLUMNS = ("state", "website", "info")


class StoreError(Exception):
    """Raised when the underlying database fails."""


class RestaurantNotFoundError(Exception):
    """Raised when no restaurant matches the requested id."""

    def __init__(self, restaurant_id: str | int) -> None:
        super().__init__(f"Restaurant {restaurant_id} not found")
        self.restaurant_id = restaurant_id


class RestaurantStore:
    """Owns the single SQLite connection used by every request.

    Statements run under a lock because request handlers execute on a
    threadpool and share the connection.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Open the database and create the restaurants table if needed.

        Args:
            db_path: Path to the SQLite file, or ":memory:"

        Raises:
            StoreError: If the database cannot be opened or initialized
        """
        self.db_path = str(db_path)
        self._lock = threading.Lock()

        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open database at {self.db_path}: {e}") from e

        self._conn.row_factory = sqlite3.Row
        try:
            self.init_schema()
        except StoreError:
            self._conn.close()
            raise

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Serialize access to the connection and commit on success."""
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except (sqlite3.Error, OverflowError) as e:
                raise StoreError(str(e)) from e

    def init_schema(self) -> None:
        """Create the restaurants table if it does not exist.

        A table from the older five-column layout gains the optional text
        columns. A table missing any required column cannot be used.

        Raises:
            StoreError: If the table cannot be created or brought up to date
        """
        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS restaurants (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    stars INTEGER NOT NULL,
                    address TEXT NOT NULL,
                    chef TEXT NOT NULL,
                    state TEXT NOT NULL DEFAULT '',
                    website TEXT NOT NULL DEFAULT '',
                    info TEXT NOT NULL DEFAULT ''
                )
            """)

            existing = {
                row["name"] for row in conn.execute("PRAGMA table_info(restaurants)")
            }
            missing = [
                column
                for column in COLUMNS
                if column not in existing and column not in OPTIONAL_COLUMNS
            ]
            if missing:
                raise StoreError(
                    f"restaurants table in {self.db_path} lacks columns: "
                    f"{', '.join(missing)}"
                )

            for column in OPTIONAL_COLUMNS:
                if column not in existing:
                    conn.execute(
                        f"ALTER TABLE restaurants "
                        f"ADD COLUMN {column} TEXT NOT NULL DEFAULT ''"
                    )
                    logger.info(f"Added column {column} to restaurants table")

        logger.info(f"Restaurant database initialized at {self.db_path}")

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()
        logger.debug(f"Closed restaurant database at {self.db_path}")

    @staticmethod
    def _to_restaurant(row: sqlite3.Row) -> Restaurant:
        return Restaurant(**{column: row[column] for column in COLUMNS})

    @staticmethod
    def _values(payload: RestaurantPayload) -> tuple:
        return (
            payload.name,
            payload.stars,
            payload.address,
            payload.chef,
            payload.state,
            payload.website,
            payload.info,
        )

    def list_restaurants(self) -> list[Restaurant]:
        """Return every restaurant in insertion order."""
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {SELECT_COLUMNS} FROM restaurants ORDER BY id"
            ).fetchall()

        restaurants = [self._to_restaurant(row) for row in rows]
        logger.debug(f"Listed {len(restaurants)} restaurants")
        return restaurants

    def get_restaurant(self, restaurant_id: str | int) -> Restaurant:
        """Look up a single restaurant.

        Args:
            restaurant_id: The key as received from the client

        Returns:
            The matching restaurant

        Raises:
            RestaurantNotFoundError: If no row has this id
            StoreError: If the query fails
        """
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT {SELECT_COLUMNS} FROM restaurants WHERE id = ?",
                (restaurant_id,),
            ).fetchone()

        if row is None:
            raise RestaurantNotFoundError(restaurant_id)
        return self._to_restaurant(row)

    def create_restaurant(self, payload: RestaurantPayload) -> Restaurant:
        """Insert a new restaurant and return it with its assigned id."""
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO restaurants (name, stars, address, chef, state, website, info)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                self._values(payload),
            )
            new_id = cursor.lastrowid

        restaurant = Restaurant.from_payload(new_id, payload)
        logger.info(f"Created restaurant {restaurant.id}: {restaurant.name}")
        return restaurant

    def update_restaurant(
        self, restaurant_id: str | int, payload: RestaurantPayload
    ) -> Restaurant:
        """Overwrite every mutable field of an existing restaurant.

        The affected-row count of the UPDATE decides whether the row exists,
        so nothing is written when it does not.

        Raises:
            RestaurantNotFoundError: If no row has this id
            StoreError: If the statement fails
        """
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE restaurants
                SET name = ?, stars = ?, address = ?, chef = ?,
                    state = ?, website = ?, info = ?
                WHERE id = ?
            """,
                (*self._values(payload), restaurant_id),
            )
            if cursor.rowcount == 0:
                raise RestaurantNotFoundError(restaurant_id)

            row = conn.execute(
                f"SELECT {SELECT_COLUMNS} FROM restaurants WHERE id = ?",
                (restaurant_id,),
            ).fetchone()

        restaurant = self._to_restaurant(row)
        logger.info(f"Updated restaurant {restaurant.id}")
        return restaurant

    def delete_restaurant(self, restaurant_id: str | int) -> None:
        """Delete a restaurant.

        Raises:
            RestaurantNotFoundError: If no row has this id
            StoreError: If the statement fails
        """
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM restaurants WHERE id = ?", (restaurant_id,)
            )
            deleted = cursor.rowcount

        if deleted == 0:
            raise RestaurantNotFoundError(restaurant_id)
        logger.info(f"Deleted restaurant {restaurant_id}")
