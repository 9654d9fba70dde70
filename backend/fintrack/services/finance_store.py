from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from uuid import uuid4

from fintrack.core.config import settings
from fintrack.models.schemas import (
    Budget,
    BudgetUpsert,
    Goal,
    GoalCreate,
    GoalFundsResponse,
    Transaction,
    TransactionCreate,
)
from fintrack.services.budget_service import previous_period

logger = logging.getLogger(__name__)

GOAL_SAVINGS_CATEGORY = "Goal Savings"
GOAL_FUNDS_NOTE_PREFIX = "Added funds to goal: "

COLLECTIONS = ("transactions", "goals", "budgets")


class RecordNotFoundError(LookupError):
    pass


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _clean_user_id(user_id: str) -> str:
    user_id = user_id.strip()
    if not user_id:
        raise ValueError("user_id cannot be empty.")
    return user_id


class FinanceStore:
    """JSON-file store for a user's transactions, goals and budgets."""

    def __init__(self, storage_path: Path | None = None) -> None:
        default_path = Path(settings.data_dir) / settings.store_filename
        self.storage_path = storage_path or default_path
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def _load(self) -> dict[str, list[dict]]:
        if not self.storage_path.exists():
            return {name: [] for name in COLLECTIONS}
        payload = json.loads(self.storage_path.read_text(encoding="utf-8"))
        return {name: payload.get(name, []) for name in COLLECTIONS}

    def _save(self, data: dict[str, list[dict]]) -> None:
        tmp_path = self.storage_path.with_suffix(".tmp")
        tmp_path.write_text(
            json.dumps(data, ensure_ascii=True, indent=2),
            encoding="utf-8",
        )
        tmp_path.replace(self.storage_path)

    @staticmethod
    def _find(records: list[dict], key: str, record_id: str, user_id: str) -> int:
        for index, record in enumerate(records):
            if record[key] == record_id and record["user_id"] == user_id:
                return index
        raise RecordNotFoundError(f"{key} '{record_id}' not found.")

    # Transactions

    def list_transactions(self, user_id: str) -> list[Transaction]:
        user_id = _clean_user_id(user_id)
        with self._lock:
            records = [x for x in self._load()["transactions"] if x["user_id"] == user_id]
        records.sort(key=lambda x: (x["transaction_date"], x["created_at"]), reverse=True)
        return [Transaction(**x) for x in records]

    def _insert_transaction(
        self,
        data: dict[str, list[dict]],
        user_id: str,
        payload: TransactionCreate,
        goal_id: str | None = None,
    ) -> dict:
        record = {
            "transaction_id": uuid4().hex,
            "user_id": user_id,
            "amount": round(float(payload.amount), 2),
            "category": payload.category.strip(),
            "transaction_type": payload.transaction_type,
            "transaction_date": payload.transaction_date.isoformat(),
            "notes": payload.notes.strip(),
            "goal_id": goal_id,
            "created_at": _now_iso(),
        }
        data["transactions"].append(record)
        return record

    def add_transaction(self, user_id: str, payload: TransactionCreate) -> Transaction:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            record = self._insert_transaction(data, user_id, payload)
            self._save(data)
        logger.info("Recorded %s of %.2f for user %s.", payload.transaction_type, payload.amount, user_id)
        return Transaction(**record)

    def update_transaction(self, user_id: str, transaction_id: str, payload: TransactionCreate) -> Transaction:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            index = self._find(data["transactions"], "transaction_id", transaction_id, user_id)
            record = data["transactions"][index]
            record.update(
                amount=round(float(payload.amount), 2),
                category=payload.category.strip(),
                transaction_type=payload.transaction_type,
                transaction_date=payload.transaction_date.isoformat(),
                notes=payload.notes.strip(),
            )
            self._save(data)
        return Transaction(**record)

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            index = self._find(data["transactions"], "transaction_id", transaction_id, user_id)
            del data["transactions"][index]
            self._save(data)
        logger.info("Deleted transaction %s for user %s.", transaction_id, user_id)

    # Goals

    def list_goals(self, user_id: str) -> list[Goal]:
        user_id = _clean_user_id(user_id)
        with self._lock:
            records = [x for x in self._load()["goals"] if x["user_id"] == user_id]
        records.sort(key=lambda x: x["created_at"])
        return [Goal(**x) for x in records]

    def get_goal(self, user_id: str, goal_id: str) -> Goal:
        user_id = _clean_user_id(user_id)
        with self._lock:
            goals = self._load()["goals"]
        return Goal(**goals[self._find(goals, "goal_id", goal_id, user_id)])

    def add_goal(self, user_id: str, payload: GoalCreate) -> Goal:
        user_id = _clean_user_id(user_id)
        record = {
            "goal_id": uuid4().hex,
            "user_id": user_id,
            "name": payload.name.strip(),
            "target_amount": round(float(payload.target_amount), 2),
            "current_amount": round(float(payload.current_amount), 2),
            "target_date": payload.target_date.isoformat() if payload.target_date else None,
            "created_at": _now_iso(),
        }
        with self._lock:
            data = self._load()
            data["goals"].append(record)
            self._save(data)
        logger.info("Created goal '%s' for user %s.", record["name"], user_id)
        return Goal(**record)

    def update_goal(self, user_id: str, goal_id: str, payload: GoalCreate) -> Goal:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            index = self._find(data["goals"], "goal_id", goal_id, user_id)
            record = data["goals"][index]
            record.update(
                name=payload.name.strip(),
                target_amount=round(float(payload.target_amount), 2),
                current_amount=round(float(payload.current_amount), 2),
                target_date=payload.target_date.isoformat() if payload.target_date else None,
            )
            self._save(data)
        return Goal(**record)

    def delete_goal(self, user_id: str, goal_id: str) -> None:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            index = self._find(data["goals"], "goal_id", goal_id, user_id)
            del data["goals"][index]
            self._save(data)
        logger.info("Deleted goal %s for user %s.", goal_id, user_id)

    def add_funds_to_goal(self, user_id: str, goal_id: str, amount: float) -> GoalFundsResponse:
        """Move ``amount`` into a goal and book it as a savings expense."""
        if not amount or amount <= 0:
            raise ValueError("Amount must be greater than zero.")
        user_id = _clean_user_id(user_id)

        with self._lock:
            data = self._load()
            index = self._find(data["goals"], "goal_id", goal_id, user_id)
            goal = data["goals"][index]
            goal["current_amount"] = round(goal["current_amount"] + float(amount), 2)
            tx = self._insert_transaction(
                data,
                user_id,
                TransactionCreate(
                    amount=amount,
                    category=GOAL_SAVINGS_CATEGORY,
                    transaction_type="expense",
                    transaction_date=date.today(),
                    notes=f"{GOAL_FUNDS_NOTE_PREFIX}{goal['name']}",
                ),
                goal_id=goal_id,
            )
            self._save(data)

        logger.info("Added %.2f to goal '%s' for user %s.", amount, goal["name"], user_id)
        return GoalFundsResponse(goal=Goal(**goal), transaction=Transaction(**tx))

    # Budgets

    def list_budgets(self, user_id: str, period: str) -> list[Budget]:
        user_id = _clean_user_id(user_id)
        with self._lock:
            records = [
                x for x in self._load()["budgets"] if x["user_id"] == user_id and x["period"] == period
            ]
        records.sort(key=lambda x: x["category"])
        return [Budget(**x) for x in records]

    def upsert_budget(self, user_id: str, payload: BudgetUpsert) -> Budget:
        user_id = _clean_user_id(user_id)
        category = payload.category.strip()
        with self._lock:
            data = self._load()
            existing = next(
                (
                    x
                    for x in data["budgets"]
                    if x["user_id"] == user_id and x["period"] == payload.period and x["category"] == category
                ),
                None,
            )
            if existing is not None:
                existing["amount"] = round(float(payload.amount), 2)
                existing["budget_type"] = payload.budget_type
                record = existing
            else:
                record = {
                    "budget_id": uuid4().hex,
                    "user_id": user_id,
                    "period": payload.period,
                    "category": category,
                    "amount": round(float(payload.amount), 2),
                    "budget_type": payload.budget_type,
                    "created_at": _now_iso(),
                }
                data["budgets"].append(record)
            self._save(data)
        return Budget(**record)

    def delete_budget(self, user_id: str, budget_id: str) -> None:
        user_id = _clean_user_id(user_id)
        with self._lock:
            data = self._load()
            index = self._find(data["budgets"], "budget_id", budget_id, user_id)
            del data["budgets"][index]
            self._save(data)

    def copy_budgets_from_previous_month(self, user_id: str, period: str) -> list[Budget]:
        user_id = _clean_user_id(user_id)
        last_period = previous_period(period)
        with self._lock:
            data = self._load()
            mine = [x for x in data["budgets"] if x["user_id"] == user_id]
            source = [x for x in mine if x["period"] == last_period]
            if not source:
                raise ValueError(f"No budgets found in {last_period} to copy.")

            taken = {x["category"] for x in mine if x["period"] == period}
            created_at = _now_iso()
            for budget in source:
                if budget["category"] in taken:
                    continue
                data["budgets"].append(
                    {
                        "budget_id": uuid4().hex,
                        "user_id": user_id,
                        "period": period,
                        "category": budget["category"],
                        "amount": budget["amount"],
                        "budget_type": budget.get("budget_type", "expense"),
                        "created_at": created_at,
                    }
                )
            self._save(data)

        logger.info("Copied budgets from %s to %s for user %s.", last_period, period, user_id)
        return self.list_budgets(user_id, period)


finance_store = FinanceStore()
