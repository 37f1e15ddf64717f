"""
Core utilities shared across the DigiCard service.

This package hosts configuration helpers (env vars, paths), structured
logging setup, password hashing, CSRF tokens and the credential-form rate
limiter. Routers and services depend on these primitives instead of reading
os.environ directly.
"""
