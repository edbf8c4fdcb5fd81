"""
Store Credit Ledger - credit accounts for retail establishments

A FastAPI service that keeps the balance ledger of store-credit accounts:
purchases, payments, interest accrual, late fees and the credit request
approval workflow.
"""

__version__ = "0.1.0"
