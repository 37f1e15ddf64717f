"""
FastAPI routers grouped by area (auth, dashboard, public cards).

Each file exposes an APIRouter that is included in the main application
(app.py).
"""
