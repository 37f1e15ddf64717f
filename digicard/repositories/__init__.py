"""
Persistence adapters.

These modules encapsulate how data is stored/retrieved (SQL for accounts and
cards, a key/value document for the local card draft). Services depend on
them rather than touching the database directly.
"""
