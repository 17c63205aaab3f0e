"""
Dompet - Database Layer
Handles all database operations using SQLite
"""
import math
import sqlite3
import logging
import uuid
from datetime import datetime, date, timedelta
from typing import Optional, List, Dict, Any, Iterable
from pathlib import Path
from contextlib import contextmanager

from dompet import fields
from dompet.fields import FieldMap

logger = logging.getLogger(__name__)


# ==================== CUSTOM EXCEPTIONS ====================
class DatabaseError(Exception):
    """Base exception for database operations."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Connection to database failed."""
    pass


class DatabaseIntegrityError(DatabaseError):
    """Database integrity constraint violated."""
    pass


class NotFoundError(DatabaseError):
    """A referenced row does not exist (or is not visible to the owner)."""
    pass


class BalanceConflictError(DatabaseError):
    """An account balance changed between read and conditional write."""
    pass


def new_id() -> str:
    return str(uuid.uuid4())


def now_timestamp() -> str:
    return datetime.now().isoformat(timespec='microseconds')


def today() -> str:
    return date.today().isoformat()


# ==================== GENERIC CRUD CLASS ====================
class OwnedTable:
    """
    Generic CRUD operations for owner-scoped entity tables.

    Every entity table follows the same pattern:
    - UUID primary key, user_id owner column, created_at timestamp
    - list by owner with a fixed ordering
    - sparse column updates restricted to a whitelist

    Usage:
        tags = OwnedTable(db, fields.TAG, order_by='name ASC')
        rows = tags.list(user_id)
        row = tags.add({'user_id': user_id, 'name': 'Liburan', 'color': '#8b5cf6'})
        tags.update(row['id'], {'name': 'Travel'})
    """

    def __init__(self, db_instance, field_map: FieldMap, order_by: str,
                 updatable: Optional[Iterable[str]] = None):
        """
        Initialize CRUD helper for a specific table.

        Args:
            db_instance: Reference to FinanceDatabase instance
            field_map: Column table for the entity (storage side is used here)
            order_by: ORDER BY clause used when listing
            updatable: Columns a sparse update may touch; defaults to every
                       column except id, user_id and created_at
        """
        self.db = db_instance
        self.fields = field_map
        self.table = field_map.table
        self.order_by = order_by
        self.columns = field_map.storage_columns
        if updatable is None:
            updatable = self.columns - {'id', 'user_id', 'created_at'}
        self.updatable = set(updatable)

    def _where(self, filters: Dict[str, Any]):
        invalid = set(filters) - self.columns
        if invalid:
            raise ValueError(f"Invalid filter columns for {self.table}: {invalid}")
        clause = " AND ".join(f"{column} IS ?" for column in filters)
        return clause, list(filters.values())

    def list(self, user_id: str, **filters) -> List[Dict[str, Any]]:
        """Get all rows owned by user_id matching the equality filters."""
        clause, values = self._where({'user_id': user_id, **filters})
        with self.db.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM {self.table} WHERE {clause} ORDER BY {self.order_by}",
                values
            )
            rows = cursor.fetchall()
            logger.debug(f"Retrieved {len(rows)} records from {self.table}")
            return [dict(row) for row in rows]

    def get(self, item_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get a single row by id, optionally scoped to its owner."""
        filters = {'id': item_id}
        if user_id is not None:
            filters['user_id'] = user_id
        clause, values = self._where(filters)
        with self.db.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM {self.table} WHERE {clause}", values)
            row = cursor.fetchone()
            return dict(row) if row else None

    def add(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new row.

        Args:
            values: Column values; id and created_at are generated when absent

        Returns:
            The persisted row
        """
        row = {'id': new_id(), **values}
        if 'created_at' in self.columns:
            row.setdefault('created_at', now_timestamp())
        invalid = set(row) - self.columns
        if invalid:
            raise ValueError(f"Invalid columns for {self.table} insert: {invalid}")

        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        try:
            with self.db.db_connection(commit=True) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                    list(row.values())
                )
                cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (row['id'],))
                created = dict(cursor.fetchone())
                logger.info(f"Added {self.table} {row['id']}")
                return created
        except DatabaseError as e:
            logger.error(f"Failed to add {self.table}: {e}")
            raise

    def update(self, item_id: str, updates: Dict[str, Any],
               user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Apply a sparse update.

        Returns:
            The updated row, or None if no row matched
        """
        scope = {'user_id': user_id} if user_id is not None else None
        if not self.db._safe_update(self.table, item_id, updates, self.updatable, scope=scope):
            return None
        return self.get(item_id)

    def delete(self, item_id: str, user_id: Optional[str] = None) -> bool:
        """Hard delete a row. Returns False if nothing matched."""
        filters = {'id': item_id}
        if user_id is not None:
            filters['user_id'] = user_id
        clause, values = self._where(filters)
        try:
            with self.db.db_connection(commit=True) as conn:
                cursor = conn.cursor()
                cursor.execute(f"DELETE FROM {self.table} WHERE {clause}", values)
                success = cursor.rowcount > 0
                if success:
                    logger.info(f"Deleted {self.table} {item_id}")
                else:
                    logger.warning(f"{self.table.capitalize()} {item_id} not found")
                return success
        except DatabaseError as e:
            logger.error(f"Failed to delete {self.table} {item_id}: {e}")
            raise


class FinanceDatabase:
    """Handle all database operations for Dompet."""

    def __init__(self, db_path: str = "data/finance.db", transfer_max_retries: int = 3):
        """Initialize database connection."""
        # Ensure data directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.transfer_max_retries = transfer_max_retries
        self._init_database()

        # Owner-scoped CRUD helpers
        self.accounts = OwnedTable(self, fields.ACCOUNT, 'created_at DESC')
        self.transfers = OwnedTable(self, fields.ACCOUNT_TRANSFER, 'date DESC, created_at DESC', updatable=())
        self.transactions = OwnedTable(self, fields.TRANSACTION, 'date DESC, created_at DESC')
        self.categories = OwnedTable(self, fields.CATEGORY, 'created_at ASC')
        self.budgets = OwnedTable(self, fields.BUDGET, 'year DESC, month DESC, created_at DESC', updatable={'amount'})
        self.debts = OwnedTable(
            self, fields.DEBT, 'created_at DESC',
            updatable={'type', 'person_name', 'amount', 'description', 'due_date'}
        )
        self.investments = OwnedTable(self, fields.INVESTMENT, 'purchase_date DESC, created_at DESC')
        self.reminders = OwnedTable(self, fields.REMINDER, 'reminder_date ASC')
        self.savings_goals = OwnedTable(self, fields.SAVINGS_GOAL, 'created_at DESC')
        self.recurring = OwnedTable(self, fields.RECURRING_TRANSACTION, 'created_at DESC')
        self.split_bills = OwnedTable(
            self, fields.SPLIT_BILL, 'created_at DESC',
            updatable={'title', 'total_amount', 'transaction_id'}
        )
        self.tags = OwnedTable(self, fields.TAG, 'name ASC')

        logger.info(f"Database initialized at {db_path}")

    def _get_connection(self, isolation_level: Optional[str] = ""):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path, timeout=10.0, isolation_level=isolation_level)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def db_connection(self, commit: bool = True):
        """
        Context manager for database connections with automatic cleanup and error handling.

        Usage:
            with self.db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM accounts")
                return [dict(row) for row in cursor.fetchall()]

        Args:
            commit: Whether to commit changes on success (default True)

        Yields:
            sqlite3.Connection: Database connection

        Raises:
            DatabaseConnectionError: If connection fails
            DatabaseIntegrityError: If a constraint is violated
            DatabaseError: If query execution fails
        """
        conn = None
        try:
            conn = self._get_connection()
            yield conn
            if commit:
                conn.commit()
        except (DatabaseError, ValueError):
            if conn:
                conn.rollback()
            raise
        except sqlite3.OperationalError as e:
            if conn:
                conn.rollback()
            logger.error(f"Database operational error: {e}")
            raise DatabaseConnectionError(f"Database connection failed: {e}") from e
        except sqlite3.IntegrityError as e:
            if conn:
                conn.rollback()
            logger.error(f"Database integrity error: {e}")
            raise DatabaseIntegrityError(f"Data integrity violation: {e}") from e
        except Exception as e:
            if conn:
                conn.rollback()
            logger.error(f"Database error: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e
        finally:
            if conn:
                conn.close()

    @contextmanager
    def transaction(self):
        """
        Explicit write transaction taking the database write lock up front.

        BEGIN IMMEDIATE makes concurrent writers queue on the lock (up to the
        connection timeout) instead of interleaving read-modify-write cycles.
        Everything executed inside the block commits together or not at all.
        """
        conn = None
        try:
            conn = self._get_connection(isolation_level=None)
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except BaseException as e:
            if conn and conn.in_transaction:
                conn.execute("ROLLBACK")
                logger.warning(f"Transaction rolled back: {type(e).__name__}: {e}")
            if isinstance(e, (DatabaseError, ValueError)) or not isinstance(e, Exception):
                raise
            if isinstance(e, sqlite3.OperationalError):
                raise DatabaseConnectionError(f"Database connection failed: {e}") from e
            if isinstance(e, sqlite3.IntegrityError):
                raise DatabaseIntegrityError(f"Data integrity violation: {e}") from e
            raise DatabaseError(f"Database operation failed: {e}") from e
        finally:
            if conn:
                conn.close()

    def _safe_update(
        self,
        table: str,
        item_id: str,
        updates: Dict[str, Any],
        allowed_columns: set,
        id_column: str = 'id',
        scope: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Perform a safe update with column whitelisting to prevent SQL injection.

        Args:
            table: Name of the table to update
            item_id: ID of the record to update
            updates: Dictionary of column names and new values
            allowed_columns: Set of allowed column names
            id_column: Name of the ID column (default: 'id')
            scope: Extra equality conditions, e.g. {'user_id': ...} for ownership

        Returns:
            True if update succeeded, False if no row matched

        Raises:
            ValueError: If invalid column names are provided
            DatabaseError: If update fails
        """
        # Validate all keys are allowed
        invalid_keys = set(updates.keys()) - allowed_columns
        if invalid_keys:
            raise ValueError(f"Invalid columns for {table} update: {invalid_keys}")

        if not updates:
            raise ValueError("No fields to update")

        conditions = {id_column: item_id, **(scope or {})}
        try:
            with self.db_connection(commit=True) as conn:
                cursor = conn.cursor()
                set_clause = ", ".join([f"{key} = ?" for key in updates.keys()])
                where_clause = " AND ".join([f"{key} = ?" for key in conditions.keys()])
                values = list(updates.values()) + list(conditions.values())

                cursor.execute(
                    f"UPDATE {table} SET {set_clause} WHERE {where_clause}",
                    values
                )

                success = cursor.rowcount > 0
                if success:
                    logger.info(f"Updated {table} {item_id}: {list(updates.keys())}")
                else:
                    logger.warning(f"{table.capitalize()} {item_id} not found for update")
                return success
        except DatabaseError as e:
            logger.error(f"Failed to update {table} {item_id}: {e}")
            raise

    def _init_database(self):
        """Create database tables if they don't exist."""
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS accounts (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                type TEXT NOT NULL,
                balance REAL NOT NULL DEFAULT 0,
                currency TEXT NOT NULL DEFAULT 'IDR',
                color TEXT,
                icon TEXT,
                is_active BOOLEAN NOT NULL DEFAULT 1,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS account_transfers (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                from_account_id TEXT NOT NULL REFERENCES accounts(id),
                to_account_id TEXT NOT NULL REFERENCES accounts(id),
                amount REAL NOT NULL CHECK (amount > 0),
                description TEXT DEFAULT '',
                date TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL,
                CHECK (from_account_id <> to_account_id)
            );

            CREATE TABLE IF NOT EXISTS categories (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                type TEXT NOT NULL,
                color TEXT,
                icon TEXT,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                category_id TEXT,
                type TEXT NOT NULL,
                amount REAL NOT NULL,
                description TEXT DEFAULT '',
                date TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS budgets (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                category_id TEXT,
                amount REAL NOT NULL,
                month INTEGER NOT NULL,
                year INTEGER NOT NULL,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS debts (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                type TEXT NOT NULL,
                person_name TEXT NOT NULL,
                amount REAL NOT NULL,
                description TEXT DEFAULT '',
                due_date TEXT,
                is_paid BOOLEAN NOT NULL DEFAULT 0,
                paid_date TEXT,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS investments (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                type TEXT NOT NULL,
                symbol TEXT DEFAULT '',
                quantity REAL NOT NULL DEFAULT 0,
                buy_price REAL NOT NULL,
                current_price REAL NOT NULL,
                currency TEXT NOT NULL DEFAULT 'IDR',
                purchase_date TEXT NOT NULL,
                notes TEXT DEFAULT '',
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS reminders (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT DEFAULT '',
                amount REAL DEFAULT 0,
                due_date TEXT NOT NULL,
                reminder_date TEXT NOT NULL,
                type TEXT NOT NULL,
                related_id TEXT,
                is_completed BOOLEAN NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS savings_goals (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                target_amount REAL NOT NULL,
                current_amount REAL NOT NULL DEFAULT 0,
                deadline TEXT,
                description TEXT DEFAULT '',
                is_completed BOOLEAN NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS recurring_transactions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                category_id TEXT NOT NULL,
                type TEXT NOT NULL,
                amount REAL NOT NULL,
                description TEXT DEFAULT '',
                frequency TEXT NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT,
                is_active BOOLEAN NOT NULL DEFAULT 1,
                last_processed TEXT,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS split_bills (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                transaction_id TEXT,
                title TEXT NOT NULL,
                total_amount REAL NOT NULL,
                created_at TIMESTAMP NOT NULL
            );

            CREATE TABLE IF NOT EXISTS split_bill_participants (
                id TEXT PRIMARY KEY,
                split_bill_id TEXT NOT NULL REFERENCES split_bills(id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                amount REAL NOT NULL,
                is_paid BOOLEAN NOT NULL DEFAULT 0,
                paid_date TEXT
            );

            CREATE TABLE IF NOT EXISTS tags (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                color TEXT,
                created_at TIMESTAMP NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_accounts_user ON accounts(user_id);
            CREATE INDEX IF NOT EXISTS idx_transfers_user ON account_transfers(user_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions(user_id, date);
            CREATE INDEX IF NOT EXISTS idx_categories_user ON categories(user_id);
            CREATE INDEX IF NOT EXISTS idx_budgets_user_period ON budgets(user_id, year, month);
            CREATE INDEX IF NOT EXISTS idx_debts_user ON debts(user_id);
            CREATE INDEX IF NOT EXISTS idx_investments_user ON investments(user_id);
            CREATE INDEX IF NOT EXISTS idx_reminders_user ON reminders(user_id);
            CREATE INDEX IF NOT EXISTS idx_savings_goals_user ON savings_goals(user_id);
            CREATE INDEX IF NOT EXISTS idx_recurring_user ON recurring_transactions(user_id);
            CREATE INDEX IF NOT EXISTS idx_split_bills_user ON split_bills(user_id);
            CREATE INDEX IF NOT EXISTS idx_participants_bill ON split_bill_participants(split_bill_id);
            CREATE INDEX IF NOT EXISTS idx_tags_user ON tags(user_id);
        """)

        conn.commit()
        conn.close()

    # ==================== USERS ====================

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get a user row (including password_hash) by email."""
        with self.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def create_user(self, email: str, name: str, password_hash: str,
                    default_categories: Iterable[Dict[str, str]] = ()) -> Dict[str, Any]:
        """
        Create a user together with their starter categories.

        Raises:
            DatabaseIntegrityError: If the email is already registered
        """
        user_id = new_id()
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO users (id, email, name, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, email, name, password_hash, now_timestamp())
            )
            for category in default_categories:
                cursor.execute("""
                    INSERT INTO categories (id, user_id, name, type, color, icon, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    new_id(), user_id, category['name'], category['type'],
                    category['color'], category['icon'], now_timestamp()
                ))
            cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            user = dict(cursor.fetchone())

        logger.info(f"Registered user {user_id}")
        return user

    # ==================== ACCOUNTS ====================

    def get_active_accounts(self, user_id: str) -> List[Dict[str, Any]]:
        """Get the owner's accounts that have not been soft-deleted."""
        return self.accounts.list(user_id, is_active=1)

    def deactivate_account(self, account_id: str) -> bool:
        """Soft delete an account. Its row and transfers stay queryable by id."""
        return self._safe_update('accounts', account_id, {'is_active': 0}, {'is_active'})

    # ==================== ACCOUNT TRANSFERS ====================

    def get_transfers(self, user_id: str, account_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get the owner's transfers, optionally only those touching one account."""
        if account_id is None:
            return self.transfers.list(user_id)

        with self.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT * FROM account_transfers
                WHERE user_id = ? AND (from_account_id = ? OR to_account_id = ?)
                ORDER BY date DESC, created_at DESC
            """, (user_id, account_id, account_id))
            return [dict(row) for row in cursor.fetchall()]

    def _require_owned_account(self, cursor, account_id: str, user_id: str) -> Dict[str, Any]:
        cursor.execute(
            "SELECT * FROM accounts WHERE id = ? AND user_id = ? AND is_active = 1",
            (account_id, user_id)
        )
        row = cursor.fetchone()
        if row is None:
            raise NotFoundError(f"Account {account_id} not found")
        return dict(row)

    def _apply_balance_delta(self, cursor, account_id: str, delta: float) -> float:
        """
        Compare-and-swap an account balance by delta.

        Returns:
            The new balance

        Raises:
            NotFoundError: If the account disappeared
            BalanceConflictError: If the balance changed after it was read
        """
        cursor.execute("SELECT balance FROM accounts WHERE id = ?", (account_id,))
        row = cursor.fetchone()
        if row is None:
            raise NotFoundError(f"Account {account_id} not found")

        observed = row['balance']
        new_balance = observed + delta
        cursor.execute(
            "UPDATE accounts SET balance = ? WHERE id = ? AND balance = ?",
            (new_balance, account_id, observed)
        )
        if cursor.rowcount != 1:
            raise BalanceConflictError(f"Balance of account {account_id} changed during update")

        logger.debug(f"Account {account_id} balance {observed} -> {new_balance}")
        return new_balance

    def _apply_transfer(self, user_id: str, from_account_id: str, to_account_id: str,
                        amount: float, description: str, transfer_date: str) -> Dict[str, Any]:
        with self.transaction() as conn:
            cursor = conn.cursor()
            self._require_owned_account(cursor, from_account_id, user_id)
            self._require_owned_account(cursor, to_account_id, user_id)

            transfer_id = new_id()
            cursor.execute("""
                INSERT INTO account_transfers
                (id, user_id, from_account_id, to_account_id, amount, description, date, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                transfer_id, user_id, from_account_id, to_account_id,
                amount, description, transfer_date, now_timestamp()
            ))

            self._apply_balance_delta(cursor, from_account_id, -amount)
            self._apply_balance_delta(cursor, to_account_id, amount)

            cursor.execute("SELECT * FROM account_transfers WHERE id = ?", (transfer_id,))
            return dict(cursor.fetchone())

    def create_transfer(
        self,
        user_id: str,
        from_account_id: str,
        to_account_id: str,
        amount: float,
        description: Optional[str] = None,
        transfer_date: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Move money between two of the owner's accounts.

        The transfer row, the debit and the credit are written in a single
        transaction: either all three persist or none does. Balance writes
        are conditional on the value read, and a conflicting write is retried
        from scratch up to transfer_max_retries times.

        Args:
            user_id: Owner of both accounts
            from_account_id: Account to debit
            to_account_id: Account to credit
            amount: Positive amount to move
            description: Optional free text
            transfer_date: ISO date, defaults to today

        Returns:
            The persisted transfer row

        Raises:
            ValueError: Same source and destination, or amount not a positive number
            NotFoundError: Either account is missing, inactive or not owned
            BalanceConflictError: Retries exhausted
        """
        if from_account_id == to_account_id:
            raise ValueError("Cannot transfer to the same account")
        if amount is None or not math.isfinite(amount):
            raise ValueError("Amount must be a finite number")
        if amount <= 0:
            raise ValueError("Amount must be greater than zero")

        description = description or ''
        transfer_date = transfer_date or today()

        attempt = 0
        while True:
            attempt += 1
            try:
                transfer = self._apply_transfer(
                    user_id, from_account_id, to_account_id, amount, description, transfer_date
                )
                logger.info(
                    f"Transfer {transfer['id']}: {amount} from {from_account_id} to {to_account_id}"
                )
                return transfer
            except BalanceConflictError:
                if attempt >= self.transfer_max_retries:
                    logger.error(f"Transfer aborted after {attempt} balance conflicts")
                    raise
                logger.warning(f"Balance conflict on transfer attempt {attempt}, retrying")

    # ==================== BUDGETS ====================

    def upsert_budget(self, user_id: str, category_id: Optional[str], amount: float,
                      month: int, year: int) -> Dict[str, Any]:
        """Create the budget for a period, or update the amount if one exists."""
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT id FROM budgets
                WHERE user_id = ? AND category_id IS ? AND month = ? AND year = ?
            """, (user_id, category_id, month, year))
            existing = cursor.fetchone()

            if existing:
                budget_id = existing['id']
                cursor.execute("UPDATE budgets SET amount = ? WHERE id = ?", (amount, budget_id))
                logger.info(f"Updated budget {budget_id} for {month}/{year}")
            else:
                budget_id = new_id()
                cursor.execute("""
                    INSERT INTO budgets (id, user_id, category_id, amount, month, year, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (budget_id, user_id, category_id, amount, month, year, now_timestamp()))
                logger.info(f"Added budget {budget_id} for {month}/{year}")

            cursor.execute("SELECT * FROM budgets WHERE id = ?", (budget_id,))
            return dict(cursor.fetchone())

    # ==================== DEBTS ====================

    def mark_debt_paid(self, debt_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Mark a debt as paid today. Already-paid debts keep their paid date.

        Returns:
            The debt row, or None if the owner has no such debt
        """
        with self.db_connection(commit=True) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE debts SET is_paid = 1, paid_date = ? WHERE id = ? AND user_id = ? AND is_paid = 0",
                (today(), debt_id, user_id)
            )
            if cursor.rowcount:
                logger.info(f"Debt {debt_id} marked as paid")
        return self.debts.get(debt_id, user_id=user_id)

    # ==================== REMINDERS ====================

    def get_open_reminders(self, user_id: str, upcoming: bool = False,
                           window_days: int = 7) -> List[Dict[str, Any]]:
        """Get reminders not yet completed, optionally only those due within the window."""
        query = "SELECT * FROM reminders WHERE user_id = ? AND is_completed = 0"
        params: List[Any] = [user_id]
        if upcoming:
            query += " AND reminder_date <= ?"
            params.append((date.today() + timedelta(days=window_days)).isoformat())
        query += " ORDER BY reminder_date ASC"

        with self.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    # ==================== SPLIT BILLS ====================

    def _participants_for(self, cursor, bill_ids: List[str]) -> Dict[str, List[Dict[str, Any]]]:
        grouped: Dict[str, List[Dict[str, Any]]] = {bill_id: [] for bill_id in bill_ids}
        if not bill_ids:
            return grouped
        placeholders = ", ".join("?" for _ in bill_ids)
        cursor.execute(
            f"SELECT * FROM split_bill_participants WHERE split_bill_id IN ({placeholders}) ORDER BY rowid",
            bill_ids
        )
        for row in cursor.fetchall():
            grouped[row['split_bill_id']].append(dict(row))
        return grouped

    def get_split_bills(self, user_id: str) -> List[Dict[str, Any]]:
        """Get the owner's split bills, each with a 'participants' list."""
        with self.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM split_bills WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,)
            )
            bills = [dict(row) for row in cursor.fetchall()]
            participants = self._participants_for(cursor, [bill['id'] for bill in bills])

        for bill in bills:
            bill['participants'] = participants[bill['id']]
        return bills

    def get_split_bill(self, bill_id: str) -> Optional[Dict[str, Any]]:
        """Get one split bill with its participants."""
        with self.db_connection(commit=False) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM split_bills WHERE id = ?", (bill_id,))
            row = cursor.fetchone()
            if not row:
                return None
            bill = dict(row)
            bill['participants'] = self._participants_for(cursor, [bill_id])[bill_id]
            return bill

    def add_split_bill(self, user_id: str, title: str, total_amount: float,
                       participants: List[Dict[str, Any]],
                       transaction_id: Optional[str] = None) -> Dict[str, Any]:
        """Create a bill and its participants in one transaction."""
        bill_id = new_id()
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO split_bills (id, user_id, transaction_id, title, total_amount, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (bill_id, user_id, transaction_id, title, total_amount, now_timestamp()))
            for participant in participants:
                cursor.execute("""
                    INSERT INTO split_bill_participants (id, split_bill_id, name, amount)
                    VALUES (?, ?, ?, ?)
                """, (new_id(), bill_id, participant['name'], participant['amount']))

        logger.info(f"Added split bill {bill_id} with {len(participants)} participants")
        return self.get_split_bill(bill_id)

    def delete_split_bill(self, bill_id: str) -> bool:
        """Delete a bill and its participants."""
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM split_bill_participants WHERE split_bill_id = ?", (bill_id,))
            cursor.execute("DELETE FROM split_bills WHERE id = ?", (bill_id,))
            success = cursor.rowcount > 0

        if success:
            logger.info(f"Deleted split bill {bill_id}")
        else:
            logger.warning(f"Split bill {bill_id} not found")
        return success

    def pay_split_bill_participant(self, bill_id: str, participant_id: str) -> Optional[Dict[str, Any]]:
        """
        Record a participant's share as paid today.

        Returns:
            The participant row, or None if it does not belong to the bill
        """
        with self.db_connection(commit=True) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE split_bill_participants
                SET is_paid = 1, paid_date = ?
                WHERE id = ? AND split_bill_id = ?
            """, (today(), participant_id, bill_id))
            if cursor.rowcount == 0:
                logger.warning(f"Participant {participant_id} not found on split bill {bill_id}")
                return None
            cursor.execute("SELECT * FROM split_bill_participants WHERE id = ?", (participant_id,))
            logger.info(f"Participant {participant_id} paid on split bill {bill_id}")
            return dict(cursor.fetchone())
