"""
High-level use cases for the notecalc application.

Routers call these services for login/logout and session lookups instead of
handling credentials or session tokens directly.
"""
