"""WorkSync payroll backend.

Reconciles employee worksheets against the payment ledger and settles
unpaid hours into payment records.
"""

__version__ = "0.1.0"
