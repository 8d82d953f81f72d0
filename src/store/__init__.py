"""In-memory accrual store.

This package holds the staging row, committed table, and state of a
running study, and derives column orders, selections, and exports.
"""
