"""
Dompet - Field Mapping
Declarative client (camelCase) <-> storage (snake_case) naming per entity
"""
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional


def money(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def flag(value: Any) -> bool:
    return bool(value)


def day(value: Any) -> Optional[str]:
    """Trim stored dates/timestamps to YYYY-MM-DD."""
    if value is None:
        return None
    return str(value)[:10]


class Column(NamedTuple):
    client: str
    storage: str
    coerce: Optional[Callable[[Any], Any]] = None


class FieldMap:
    """
    Bidirectional field-name table for one storage table.

    Usage:
        ACCOUNT.to_client(row)          # {'user_id': ...} -> {'userId': ...}
        ACCOUNT.to_storage(payload)     # {'isActive': False} -> {'is_active': False}
    """

    def __init__(self, table: str, columns: Iterable[Column]):
        self.table = table
        self.columns = tuple(columns)
        self._by_client = {c.client: c for c in self.columns}
        self._by_storage = {c.storage: c for c in self.columns}

    @property
    def storage_columns(self) -> set:
        return set(self._by_storage)

    def storage_name(self, client_name: str) -> str:
        return self._by_client[client_name].storage

    def to_client(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Reshape a storage row for the client, applying read coercions."""
        result = {}
        for column in self.columns:
            if column.storage not in row:
                continue
            value = row[column.storage]
            if column.coerce is not None:
                value = column.coerce(value)
            result[column.client] = value
        return result

    def to_storage(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map client field names to storage columns.

        Raises:
            KeyError: If the payload carries a field this entity does not know
        """
        unknown = set(payload) - set(self._by_client)
        if unknown:
            raise KeyError(f"Unknown fields for {self.table}: {sorted(unknown)}")
        return {self._by_client[name].storage: value for name, value in payload.items()}


USER = FieldMap('users', [
    Column('id', 'id'),
    Column('email', 'email'),
    Column('name', 'name'),
    Column('createdAt', 'created_at'),
])

ACCOUNT = FieldMap('accounts', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('name', 'name'),
    Column('type', 'type'),
    Column('balance', 'balance', money),
    Column('currency', 'currency'),
    Column('color', 'color'),
    Column('icon', 'icon'),
    Column('isActive', 'is_active', flag),
    Column('createdAt', 'created_at'),
])

ACCOUNT_TRANSFER = FieldMap('account_transfers', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('fromAccountId', 'from_account_id'),
    Column('toAccountId', 'to_account_id'),
    Column('amount', 'amount', money),
    Column('description', 'description'),
    Column('date', 'date', day),
    Column('createdAt', 'created_at'),
])

TRANSACTION = FieldMap('transactions', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('categoryId', 'category_id'),
    Column('type', 'type'),
    Column('amount', 'amount', money),
    Column('description', 'description'),
    Column('date', 'date', day),
    Column('createdAt', 'created_at'),
])

CATEGORY = FieldMap('categories', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('name', 'name'),
    Column('type', 'type'),
    Column('color', 'color'),
    Column('icon', 'icon'),
    Column('createdAt', 'created_at'),
])

BUDGET = FieldMap('budgets', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('categoryId', 'category_id'),
    Column('amount', 'amount', money),
    Column('month', 'month'),
    Column('year', 'year'),
    Column('createdAt', 'created_at'),
])

DEBT = FieldMap('debts', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('type', 'type'),
    Column('personName', 'person_name'),
    Column('amount', 'amount', money),
    Column('description', 'description'),
    Column('dueDate', 'due_date', day),
    Column('isPaid', 'is_paid', flag),
    Column('paidDate', 'paid_date', day),
    Column('createdAt', 'created_at'),
])

INVESTMENT = FieldMap('investments', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('name', 'name'),
    Column('type', 'type'),
    Column('symbol', 'symbol'),
    Column('quantity', 'quantity', money),
    Column('buyPrice', 'buy_price', money),
    Column('currentPrice', 'current_price', money),
    Column('currency', 'currency'),
    Column('purchaseDate', 'purchase_date', day),
    Column('notes', 'notes'),
    Column('createdAt', 'created_at'),
])

REMINDER = FieldMap('reminders', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('title', 'title'),
    Column('description', 'description'),
    Column('amount', 'amount', money),
    Column('dueDate', 'due_date', day),
    Column('reminderDate', 'reminder_date', day),
    Column('type', 'type'),
    Column('relatedId', 'related_id'),
    Column('isCompleted', 'is_completed', flag),
    Column('createdAt', 'created_at'),
])

SAVINGS_GOAL = FieldMap('savings_goals', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('name', 'name'),
    Column('targetAmount', 'target_amount', money),
    Column('currentAmount', 'current_amount', money),
    Column('deadline', 'deadline', day),
    Column('description', 'description'),
    Column('isCompleted', 'is_completed', flag),
    Column('createdAt', 'created_at'),
])

RECURRING_TRANSACTION = FieldMap('recurring_transactions', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('categoryId', 'category_id'),
    Column('type', 'type'),
    Column('amount', 'amount', money),
    Column('description', 'description'),
    Column('frequency', 'frequency'),
    Column('startDate', 'start_date', day),
    Column('endDate', 'end_date', day),
    Column('isActive', 'is_active', flag),
    Column('lastProcessed', 'last_processed', day),
    Column('createdAt', 'created_at'),
])

SPLIT_BILL = FieldMap('split_bills', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('transactionId', 'transaction_id'),
    Column('title', 'title'),
    Column('totalAmount', 'total_amount', money),
    Column('createdAt', 'created_at'),
])

SPLIT_BILL_PARTICIPANT = FieldMap('split_bill_participants', [
    Column('id', 'id'),
    Column('splitBillId', 'split_bill_id'),
    Column('name', 'name'),
    Column('amount', 'amount', money),
    Column('isPaid', 'is_paid', flag),
    Column('paidDate', 'paid_date', day),
])

TAG = FieldMap('tags', [
    Column('id', 'id'),
    Column('userId', 'user_id'),
    Column('name', 'name'),
    Column('color', 'color'),
    Column('createdAt', 'created_at'),
])
