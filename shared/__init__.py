"""
Shared Kernel

Value objects shared across the domain apps: money amounts and date
ranges used by the calendar and pricing code.
"""
