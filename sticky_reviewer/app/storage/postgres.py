"""PostgreSQL-backed repositories built on psycopg2."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Tuple

import psycopg2
import psycopg2.extras
from psycopg2.extensions import connection as PgConnection
from psycopg2.extensions import cursor as PgCursor

from ..exceptions import StoreUnavailableError
from ..reviews.models import ProductReview, ProviderFailureLog
from ..sites.models import SiteConfiguration, StarRating

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], PgConnection]

SCHEMA_STATEMENTS: Tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS site_configurations (
        site_id TEXT PRIMARY KEY,
        plan TEXT NOT NULL,
        enabled BOOLEAN NOT NULL DEFAULT TRUE,
        document JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS manual_reviews (
        id TEXT PRIMARY KEY,
        site_id TEXT NOT NULL,
        product_id TEXT NOT NULL,
        rating NUMERIC(3, 2) NOT NULL CHECK (rating >= 0 AND rating <= 5),
        review_count INTEGER NOT NULL DEFAULT 0 CHECK (review_count >= 0),
        display_text TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        UNIQUE (site_id, product_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS provider_failure_logs (
        id TEXT PRIMARY KEY,
        site_id TEXT NOT NULL,
        product_id TEXT,
        provider_name TEXT NOT NULL,
        error_message TEXT NOT NULL DEFAULT '',
        occurred_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        notified BOOLEAN NOT NULL DEFAULT FALSE,
        skipped BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    "ALTER TABLE provider_failure_logs ADD COLUMN IF NOT EXISTS skipped BOOLEAN NOT NULL DEFAULT FALSE",
    "DROP INDEX IF EXISTS provider_failure_logs_pending_idx",
    """
    CREATE INDEX IF NOT EXISTS provider_failure_logs_dispatch_idx
    ON provider_failure_logs (occurred_at)
    WHERE notified = FALSE AND skipped = FALSE
    """,
)


def connect(params: Mapping[str, Any]) -> PgConnection:
    return psycopg2.connect(**params)


def create_schema(conn: PgConnection) -> None:
    """Create the tables used by the repositories when they are missing."""

    with conn.cursor() as cursor:
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)
    conn.commit()


@contextmanager
def managed_connection(
    conn: Optional[PgConnection],
    factory: Optional[ConnectionFactory],
) -> Iterator[Tuple[PgConnection, bool]]:
    """Yield ``(connection, managed)``; managed connections are closed on exit."""

    if conn is not None:
        yield conn, False
        return
    if factory is None:
        raise RuntimeError("Either a connection or a connection factory is required")

    connection = factory()
    try:
        yield connection, True
    finally:
        connection.close()


class _PostgresRepository:
    def __init__(
        self,
        *,
        conn: Optional[PgConnection] = None,
        connection_factory: Optional[ConnectionFactory] = None,
    ) -> None:
        self._conn = conn
        self._connection_factory = connection_factory

    @contextmanager
    def _cursor(self, operation: str) -> Iterator[PgCursor]:
        try:
            with managed_connection(self._conn, self._connection_factory) as (connection, managed):
                cursor = connection.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
                try:
                    yield cursor
                    if managed:
                        connection.commit()
                except Exception:
                    if managed:
                        connection.rollback()
                    raise
                finally:
                    cursor.close()
        except psycopg2.Error as exc:
            logger.exception("Storage operation failed", extra={"storage_operation": operation})
            raise StoreUnavailableError(operation, str(exc)) from exc


def _row_to_configuration(row: Mapping[str, Any]) -> SiteConfiguration:
    document = dict(row["document"])
    document.update(
        {
            "site_id": row["site_id"],
            "created_at": row["created_at"],
            "updated_at": row["updated_at"],
        }
    )
    return SiteConfiguration.model_validate(document)


def _row_to_product_review(row: Mapping[str, Any]) -> ProductReview:
    return ProductReview(
        id=row["id"],
        site_id=row["site_id"],
        product_id=row["product_id"],
        rating=StarRating(value=row["rating"]),
        review_count=int(row["review_count"]),
        display_text=row.get("display_text") or "",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_failure_log(row: Mapping[str, Any]) -> ProviderFailureLog:
    return ProviderFailureLog(
        id=row["id"],
        site_id=row["site_id"],
        product_id=row.get("product_id"),
        provider_name=row["provider_name"],
        error_message=row.get("error_message") or "",
        occurred_at=row["occurred_at"],
        notified=bool(row.get("notified")),
        skipped=bool(row.get("skipped")),
    )


class PostgresSiteConfigurationRepository(_PostgresRepository):
    """Stores each configuration as a JSONB document keyed by site id."""

    def get(self, site_id: str) -> Optional[SiteConfiguration]:
        with self._cursor("site_configuration.get") as cursor:
            cursor.execute(
                """
                SELECT site_id, document, created_at, updated_at
                FROM site_configurations
                WHERE site_id = %s
                LIMIT 1
                """,
                (site_id,),
            )
            row = cursor.fetchone()
            return _row_to_configuration(row) if row else None

    def upsert(self, configuration: SiteConfiguration) -> SiteConfiguration:
        document = configuration.model_dump(mode="json", exclude={"site_id", "created_at", "updated_at"})
        with self._cursor("site_configuration.upsert") as cursor:
            cursor.execute(
                """
                INSERT INTO site_configurations (site_id, plan, enabled, document, created_at, updated_at)
                VALUES (%(site_id)s, %(plan)s, %(enabled)s, %(document)s, %(created_at)s, %(updated_at)s)
                ON CONFLICT (site_id) DO UPDATE SET
                    plan = EXCLUDED.plan,
                    enabled = EXCLUDED.enabled,
                    document = EXCLUDED.document,
                    updated_at = EXCLUDED.updated_at
                RETURNING site_id, document, created_at, updated_at
                """,
                {
                    "site_id": configuration.site_id,
                    "plan": configuration.plan.value,
                    "enabled": configuration.enabled,
                    "document": psycopg2.extras.Json(document),
                    "created_at": configuration.created_at,
                    "updated_at": configuration.updated_at,
                },
            )
            row = cursor.fetchone()
            if not row:
                raise RuntimeError("Failed to persist site configuration")
            return _row_to_configuration(row)


class PostgresManualReviewRepository(_PostgresRepository):
    def get(self, site_id: str, product_id: str) -> Optional[ProductReview]:
        with self._cursor("manual_review.get") as cursor:
            cursor.execute(
                """
                SELECT *
                FROM manual_reviews
                WHERE site_id = %s AND product_id = %s
                LIMIT 1
                """,
                (site_id, product_id),
            )
            row = cursor.fetchone()
            return _row_to_product_review(row) if row else None

    def list_for_site(self, site_id: str) -> Sequence[ProductReview]:
        with self._cursor("manual_review.list") as cursor:
            cursor.execute(
                """
                SELECT *
                FROM manual_reviews
                WHERE site_id = %s
                ORDER BY product_id
                """,
                (site_id,),
            )
            return [_row_to_product_review(row) for row in cursor.fetchall()]

    def create(self, review: ProductReview) -> ProductReview:
        with self._cursor("manual_review.create") as cursor:
            cursor.execute(
                """
                INSERT INTO manual_reviews (
                    id, site_id, product_id, rating, review_count, display_text, created_at, updated_at
                )
                VALUES (%(id)s, %(site_id)s, %(product_id)s, %(rating)s, %(review_count)s,
                        %(display_text)s, %(created_at)s, %(updated_at)s)
                RETURNING *
                """,
                self._params(review),
            )
            row = cursor.fetchone()
            if not row:
                raise RuntimeError("Failed to persist manual review")
            return _row_to_product_review(row)

    def update(self, review: ProductReview) -> ProductReview:
        with self._cursor("manual_review.update") as cursor:
            cursor.execute(
                """
                UPDATE manual_reviews
                SET rating = %(rating)s,
                    review_count = %(review_count)s,
                    display_text = %(display_text)s,
                    updated_at = %(updated_at)s
                WHERE site_id = %(site_id)s AND product_id = %(product_id)s
                RETURNING *
                """,
                self._params(review),
            )
            row = cursor.fetchone()
            if not row:
                raise LookupError(f"No manual review stored for {review.site_id}/{review.product_id}")
            return _row_to_product_review(row)

    def delete(self, site_id: str, product_id: str) -> bool:
        with self._cursor("manual_review.delete") as cursor:
            cursor.execute(
                "DELETE FROM manual_reviews WHERE site_id = %s AND product_id = %s",
                (site_id, product_id),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _params(review: ProductReview) -> dict:
        return {
            "id": review.id,
            "site_id": review.site_id,
            "product_id": review.product_id,
            "rating": review.rating.value,
            "review_count": review.review_count,
            "display_text": review.display_text,
            "created_at": review.created_at,
            "updated_at": review.updated_at,
        }


class PostgresFailureLogRepository(_PostgresRepository):
    def append(self, entry: ProviderFailureLog) -> ProviderFailureLog:
        with self._cursor("failure_log.append") as cursor:
            cursor.execute(
                """
                INSERT INTO provider_failure_logs (
                    id, site_id, product_id, provider_name, error_message, occurred_at,
                    notified, skipped
                )
                VALUES (%(id)s, %(site_id)s, %(product_id)s, %(provider_name)s,
                        %(error_message)s, %(occurred_at)s, %(notified)s, %(skipped)s)
                RETURNING *
                """,
                {
                    "id": entry.id,
                    "site_id": entry.site_id,
                    "product_id": entry.product_id,
                    "provider_name": entry.provider_name,
                    "error_message": entry.error_message,
                    "occurred_at": entry.occurred_at,
                    "notified": entry.notified,
                    "skipped": entry.skipped,
                },
            )
            row = cursor.fetchone()
            if not row:
                raise RuntimeError("Failed to persist provider failure log")
            return _row_to_failure_log(row)

    def list_for_site(self, site_id: str, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        with self._cursor("failure_log.list") as cursor:
            cursor.execute(
                """
                SELECT *
                FROM provider_failure_logs
                WHERE site_id = %s
                ORDER BY occurred_at DESC
                LIMIT %s
                """,
                (site_id, limit),
            )
            return [_row_to_failure_log(row) for row in cursor.fetchall()]

    def list_unnotified(self, *, limit: int = 100) -> Sequence[ProviderFailureLog]:
        with self._cursor("failure_log.list_unnotified") as cursor:
            cursor.execute(
                """
                SELECT *
                FROM provider_failure_logs
                WHERE notified = FALSE AND skipped = FALSE
                ORDER BY occurred_at ASC
                LIMIT %s
                """,
                (limit,),
            )
            return [_row_to_failure_log(row) for row in cursor.fetchall()]

    def mark_notified(self, entry_id: str) -> Optional[ProviderFailureLog]:
        with self._cursor("failure_log.mark_notified") as cursor:
            cursor.execute(
                """
                UPDATE provider_failure_logs
                SET notified = TRUE
                WHERE id = %s
                RETURNING *
                """,
                (entry_id,),
            )
            row = cursor.fetchone()
            return _row_to_failure_log(row) if row else None

    def mark_skipped(self, entry_id: str) -> Optional[ProviderFailureLog]:
        with self._cursor("failure_log.mark_skipped") as cursor:
            cursor.execute(
                """
                UPDATE provider_failure_logs
                SET skipped = TRUE
                WHERE id = %s AND notified = FALSE
                RETURNING *
                """,
                (entry_id,),
            )
            row = cursor.fetchone()
            return _row_to_failure_log(row) if row else None
