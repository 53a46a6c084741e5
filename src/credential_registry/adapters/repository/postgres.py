"""
PostgreSQL repository adapter - Implements RegistryRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design - Atomic Transitions:
----------------------------------------
Every mutation runs in a single transaction so a failed check never leaves
partial state behind:

1. **authorize_issuer**: INSERT ... ON CONFLICT DO UPDATE WHERE NOT
   authorized. The UNIQUE principal key makes the check-and-set atomic;
   exactly one concurrent authorization of the same principal wins.

2. **issue_credential**: SELECT FOR UPDATE on the issuer row, then
   UPDATE ... RETURNING on the single registry_state row. The counter row
   lock serializes id allocation, so ids are gap-free and strictly
   increasing in commit order. An unauthorized issuer rolls back before
   the counter is touched.

3. **revoke_credential**: SELECT FOR UPDATE on the credential row. A
   concurrent revoker blocks on the lock and then observes is_valid = FALSE.

Lock order is always issuer row -> registry_state row, which rules out
deadlocks between concurrent issuers.
"""

import logging
from pathlib import Path

from psycopg_pool import ConnectionPool

from credential_registry.domain.ports import Credential, Issuer, RevokeResult

logger = logging.getLogger(__name__)

_CREDENTIAL_COLUMNS = "id, holder, issuer, skill_name, credential_ref, issue_date, expiry, is_valid"


def _row_to_credential(row: tuple) -> Credential:
    return Credential(
        id=row[0],
        holder=row[1],
        issuer=row[2],
        skill_name=row[3],
        credential_ref=row[4],
        issue_date=row[5],
        expiry=row[6],
        is_valid=row[7],
    )


class PostgresRegistryRepository:
    """
    Implements RegistryRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def authorize_issuer(self, issuer: str, organization_name: str) -> bool:
        """
        Atomically authorize an issuer.

        The WHERE clause ensures only an unauthorized record is overwritten.

        Returns:
            True if authorized now, False if already authorized
        """
        sql = """
            INSERT INTO issuers (principal, authorized, organization_name, issued_count, authorized_at)
            VALUES (%s, TRUE, %s, 0, NOW())
            ON CONFLICT (principal) DO UPDATE
            SET authorized = TRUE,
                organization_name = EXCLUDED.organization_name,
                issued_count = 0,
                authorized_at = NOW()
            WHERE issuers.authorized = FALSE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (issuer, organization_name))
            conn.commit()
            # Returns 1 if INSERT succeeded OR UPDATE WHERE matched (unauthorized only)
            return cursor.rowcount == 1

    def issue_credential(
        self,
        issuer: str,
        holder: str,
        skill_name: str,
        credential_ref: str,
        expiry: int,
        issued_at: int,
    ) -> int | None:
        """
        Atomically mint a credential.

        Returns:
            The new credential id, or None if the issuer is not authorized
        """
        select_sql = """
            SELECT authorized
            FROM issuers
            WHERE principal = %s
            FOR UPDATE
        """

        allocate_sql = """
            UPDATE registry_state
            SET next_id = next_id + 1
            WHERE singleton
            RETURNING next_id
        """

        insert_sql = """
            INSERT INTO credentials
                (id, holder, issuer, skill_name, credential_ref, issue_date, expiry, is_valid)
            VALUES (%s, %s, %s, %s, %s, %s, %s, TRUE)
        """

        count_sql = """
            UPDATE issuers
            SET issued_count = issued_count + 1
            WHERE principal = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(select_sql, (issuer,))
            row = cursor.fetchone()

            if row is None or not row[0]:
                conn.rollback()
                return None

            cursor.execute(allocate_sql)
            credential_id = cursor.fetchone()[0]

            cursor.execute(
                insert_sql,
                (credential_id, holder, issuer, skill_name, credential_ref, issued_at, expiry),
            )
            cursor.execute(count_sql, (issuer,))
            conn.commit()
            return credential_id

    def revoke_credential(self, caller: str, credential_id: int) -> RevokeResult:
        """
        Atomically revoke a credential issued by caller.

        Uses SELECT FOR UPDATE to lock the row, so concurrent revocations
        of the same credential produce exactly one SUCCESS.
        """
        select_sql = """
            SELECT issuer, is_valid
            FROM credentials
            WHERE id = %s
            FOR UPDATE
        """

        revoke_sql = """
            UPDATE credentials
            SET is_valid = FALSE
            WHERE id = %s AND is_valid = TRUE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(select_sql, (credential_id,))
            row = cursor.fetchone()

            if row is None or row[0] != caller:
                conn.commit()
                return RevokeResult.NOT_ISSUER

            if not row[1]:
                conn.commit()
                return RevokeResult.ALREADY_REVOKED

            cursor.execute(revoke_sql, (credential_id,))
            conn.commit()
            return RevokeResult.SUCCESS

    def get_credential(self, credential_id: int) -> Credential | None:
        sql = f"SELECT {_CREDENTIAL_COLUMNS} FROM credentials WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (credential_id,))
            row = cursor.fetchone()

        if row is None:
            return None
        return _row_to_credential(row)

    def get_issuer(self, principal: str) -> Issuer | None:
        sql = """
            SELECT principal, authorized, organization_name, issued_count
            FROM issuers
            WHERE principal = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (principal,))
            row = cursor.fetchone()

        if row is None:
            return None
        return Issuer(
            principal=row[0],
            authorized=row[1],
            organization_name=row[2],
            issued_count=row[3],
        )

    def get_holder_credentials(self, holder: str) -> list[int]:
        # Ids are allocated in issuance order, so ordering by id is insertion order
        sql = "SELECT id FROM credentials WHERE holder = %s ORDER BY id"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (holder,))
            return [row[0] for row in cursor.fetchall()]

    def last_credential_id(self) -> int:
        sql = "SELECT next_id FROM registry_state WHERE singleton"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            row = cursor.fetchone()

        return row[0] if row is not None else 0


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/credential_registry/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).resolve().parents[4] / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
