"""
Finance Manager - Source Package

A personal finance manager for bank accounts, transactions, budgets
and savings goals, stored as records in a remote table store.

DESIGN PRINCIPLES:
1. Every record goes through the record gateway
2. Fail visibly: failed reads and writes become user notices
3. Forms are validated before anything is sent
4. Every mutation is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Manager Team"
