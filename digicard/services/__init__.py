"""
High-level use cases for the DigiCard service.

Each service module orchestrates repositories/adapters to implement business
rules (register, save a card, resolve a public card, aggregate analytics).

Routers (FastAPI endpoints) call these services instead of manipulating the
database or sessions directly.
"""
