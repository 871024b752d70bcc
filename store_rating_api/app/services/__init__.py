"""
Service layer abstraction.

Each service encapsulates business logic for a domain and works on the
in‑memory data store from ``core.db``.  API handlers call services and
translate the errors from ``core.errors`` into HTTP responses.
"""
