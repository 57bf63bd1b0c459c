"""In-memory stub of the remote finance service"""

import secrets
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from finance_tracker.domain.aggregation import budget_status, summarize_budgets
from finance_tracker.domain.models import Budget, Period

DEFAULT_CATEGORIES = [
    {"name": "Salary", "icon": "💼", "type": "income"},
    {"name": "Freelance", "icon": "💻", "type": "income"},
    {"name": "Food", "icon": "🍔", "type": "expense"},
    {"name": "Transport", "icon": "🚗", "type": "expense"},
    {"name": "Entertainment", "icon": "🎬", "type": "expense"},
]


def _fail(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


class FinanceStore:
    """Users, categories, transactions and budgets keyed by id"""

    def __init__(self):
        self.users: Dict[int, Dict[str, Any]] = {}
        self.tokens: Dict[str, int] = {}
        self.categories: Dict[int, Dict[str, Any]] = {}
        self.transactions: Dict[int, Dict[str, Any]] = {}
        self.budgets: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1

    def next_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def user_for(self, request: Request) -> Optional[int]:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.tokens.get(header[len("Bearer "):])

    def category_json(self, category_id: Optional[int]) -> Optional[Dict[str, Any]]:
        category = self.categories.get(category_id) if category_id is not None else None
        if category is None:
            return None
        return {k: category[k] for k in ("id", "name", "icon", "type")}

    def transaction_json(self, txn: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": txn["id"],
            "amount": txn["amount"],
            "description": txn["description"],
            "type": txn["type"],
            "date": txn["date"],
            "CategoryId": txn["CategoryId"],
            "Category": self.category_json(txn["CategoryId"]),
        }

    def spent_for(self, budget: Dict[str, Any]) -> Decimal:
        total = Decimal("0")
        for txn in self.transactions.values():
            if txn["userId"] != budget["userId"] or txn["type"] != "expense":
                continue
            if txn["CategoryId"] != budget["CategoryId"]:
                continue
            txn_date = date.fromisoformat(txn["date"][:10])
            if txn_date.month == budget["month"] and txn_date.year == budget["year"]:
                total += Decimal(str(txn["amount"]))
        return total

    def budget_domain(self, budget: Dict[str, Any]) -> Budget:
        return Budget(
            id=budget["id"],
            category_id=budget["CategoryId"],
            budget_amount=Decimal(str(budget["budgetAmount"])),
            spent_amount=self.spent_for(budget),
            period=Period(month=budget["month"], year=budget["year"]),
        )

    def budget_json(self, budget: Dict[str, Any]) -> Dict[str, Any]:
        progress = budget_status(self.budget_domain(budget))
        return {
            "id": budget["id"],
            "CategoryId": budget["CategoryId"],
            "budgetAmount": budget["budgetAmount"],
            "spentAmount": float(progress.spent),
            "remainingAmount": float(progress.remaining),
            "percentageUsed": progress.percentage_used,
            "status": progress.status.value,
            "month": budget["month"],
            "year": budget["year"],
            "Category": self.category_json(budget["CategoryId"]),
        }


def create_app() -> FastAPI:
    app = FastAPI(title="Mock Finance Service", version="1.0.0")
    store = FinanceStore()
    app.state.store = store

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/register")
    async def register(request: Request):
        body = await request.json()
        if any(u["email"] == body.get("email") for u in store.users.values()):
            return _fail("User already exists")
        user_id = store.next_id()
        store.users[user_id] = {
            "id": user_id,
            "username": body.get("username", ""),
            "email": body.get("email", ""),
            "password": body.get("password", ""),
        }
        for category in DEFAULT_CATEGORIES:
            category_id = store.next_id()
            store.categories[category_id] = {"id": category_id, "userId": user_id, **category}
        return {"success": True, "message": "User registered successfully"}

    @app.post("/api/login")
    async def login(request: Request):
        body = await request.json()
        for user in store.users.values():
            if user["email"] == body.get("email") and user["password"] == body.get("password"):
                token = secrets.token_hex(16)
                store.tokens[token] = user["id"]
                return {
                    "success": True,
                    "token": token,
                    "user": {"id": user["id"], "username": user["username"], "email": user["email"]},
                }
        return _fail("Invalid credentials", status_code=401)

    @app.get("/api/categories")
    def list_categories(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        categories = [store.category_json(c["id"]) for c in store.categories.values() if c["userId"] == user_id]
        return {"success": True, "categories": categories}

    @app.get("/api/transactions")
    def list_transactions(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        # Newest first, as the real service orders by date descending
        rows = [t for t in store.transactions.values() if t["userId"] == user_id]
        rows.sort(key=lambda t: (t["date"], t["id"]), reverse=True)
        return {"success": True, "transactions": [store.transaction_json(t) for t in rows]}

    @app.post("/api/transactions")
    async def create_transaction(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        body = await request.json()
        category_id = body.get("CategoryId")
        if category_id is not None:
            category = store.categories.get(category_id)
            if (
                category is None
                or category["userId"] != user_id
                or category["type"] != body.get("type", "expense")
            ):
                return _fail("Invalid category")
        txn_id = store.next_id()
        store.transactions[txn_id] = {
            "id": txn_id,
            "userId": user_id,
            "amount": body.get("amount"),
            "description": body.get("description", ""),
            "type": body.get("type", "expense"),
            "date": body.get("date") or datetime.now(timezone.utc).isoformat(),
            "CategoryId": category_id,
        }
        return {"success": True, "transaction": store.transaction_json(store.transactions[txn_id])}

    @app.delete("/api/transactions/{transaction_id}")
    def delete_transaction(transaction_id: int, request: Request):
        user_id = store.user_for(request)
        txn = store.transactions.get(transaction_id)
        if user_id is None or txn is None or txn["userId"] != user_id:
            return _fail("Transaction not found", status_code=404)
        del store.transactions[transaction_id]
        return {"success": True}

    def user_budgets(user_id: int) -> list[Dict[str, Any]]:
        return [b for b in store.budgets.values() if b["userId"] == user_id]

    @app.get("/api/budgets")
    def list_budgets(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        return {"success": True, "budgets": [store.budget_json(b) for b in user_budgets(user_id)]}

    @app.post("/api/budgets")
    async def create_budget(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        body = await request.json()
        category = store.categories.get(body.get("CategoryId"))
        if category is None or category["userId"] != user_id or category["type"] != "expense":
            return _fail("Invalid category for budget")
        today = date.today()
        budget_id = store.next_id()
        store.budgets[budget_id] = {
            "id": budget_id,
            "userId": user_id,
            "CategoryId": category["id"],
            "budgetAmount": body.get("budgetAmount"),
            "month": body.get("month") or today.month,
            "year": body.get("year") or today.year,
        }
        return {"success": True, "budget": store.budget_json(store.budgets[budget_id])}

    @app.delete("/api/budgets/{budget_id}")
    def delete_budget(budget_id: int, request: Request):
        user_id = store.user_for(request)
        budget = store.budgets.get(budget_id)
        if user_id is None or budget is None or budget["userId"] != user_id:
            return _fail("Budget not found", status_code=404)
        del store.budgets[budget_id]
        return {"success": True}

    @app.get("/api/budgets/overview")
    def budget_overview(request: Request):
        user_id = store.user_for(request)
        if user_id is None:
            return _fail("Access denied", status_code=401)
        budgets = user_budgets(user_id)
        overview = summarize_budgets([store.budget_domain(b) for b in budgets])
        return {
            "success": True,
            "overview": {
                "totalBudget": float(overview.total_budget),
                "totalSpent": float(overview.total_spent),
                "remainingBudget": float(overview.remaining_budget),
                "budgetUsedPercentage": overview.budget_used_percentage,
                "overBudgetCount": overview.over_budget_count,
                "closeToLimitCount": overview.close_to_limit_count,
            },
            "budgets": [store.budget_json(b) for b in budgets],
        }

    return app


app = create_app()
