"""
Shared Kernel

This module contains base classes and utilities shared across all domain contexts.
Following DDD principles, this is the foundation for the availability and
borrowing domains: value objects, the error taxonomy, the message bus and
the unit of work.
"""
