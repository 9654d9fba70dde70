from fastapi import APIRouter

from fintrack.api.routers import budgets, goals, health, reports, savings, transactions

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(savings.router, prefix="/savings", tags=["savings"])
api_router.include_router(transactions.router, prefix="/users/{user_id}/transactions", tags=["transactions"])
api_router.include_router(goals.router, prefix="/users/{user_id}/goals", tags=["goals"])
api_router.include_router(budgets.router, prefix="/users/{user_id}/budgets", tags=["budgets"])
api_router.include_router(reports.router, prefix="/users/{user_id}/reports", tags=["reports"])
