"""
FastAPI routers grouped by resource (home/auth, notes, calculators).

Each module exposes an APIRouter included by the app factory. Handlers
validate form input, call the resource manager found on app.state and render
a template or redirect.
"""
