from fintrack.services.finance_store import FinanceStore, finance_store


def get_store() -> FinanceStore:
    return finance_store
