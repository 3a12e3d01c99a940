"""Expense management module for ProMan.

Billing per period, payment tracking and statistics.
"""

from .models import Expense, ExpenseStatus
from .routers import router

__all__ = [
    # Models
    "Expense",
    # Enums
    "ExpenseStatus",
    # Routers
    "router",
]
