"""
Core utilities shared across the notecalc application.

This package hosts configuration (env vars, storage paths), logging setup and
the cross-cutting request helpers: CSRF tokens, rate limiting, password
hashing and template rendering.
"""
