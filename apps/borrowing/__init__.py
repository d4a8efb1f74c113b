"""Borrowing app package.

Manages the borrow request lifecycle (pending -> approved / rejected,
or deleted) and the Conflict Guard that keeps approved bookings of a
horse from ever overlapping, including under concurrent approvals.
"""
