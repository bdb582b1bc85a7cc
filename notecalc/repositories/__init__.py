"""
Persistence adapters.

Each resource has a manager owning one JSON file. Routers depend on the
CollectionStore interface rather than touching the files directly, so a
manager can later be swapped for a real embedded store.
"""
