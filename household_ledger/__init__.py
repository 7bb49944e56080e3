"""
Household Ledger - Source Package

Shared-finances calculation engine for a two-person household:
monthly settlement of shared expenses, savings goals backed by
transaction history, trip funds, investments and loans.

DESIGN PRINCIPLES:
1. Every calculation is a pure function of its inputs
2. Money is Decimal, rounded to cents after every step
3. Installments and splits always reconcile to the cent
4. Bad data degrades to safe defaults, bad calls fail loudly
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Household Ledger Team"
