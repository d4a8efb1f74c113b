"""Availability app package.

Owns owner-declared blocked ranges and the Availability Aggregator that
merges them with approved borrow requests into one unavailable timeline.
Every conflict test in the project, advisory or authoritative, goes
through ``apps.availability.domain.timeline.find_conflicts``.
"""
