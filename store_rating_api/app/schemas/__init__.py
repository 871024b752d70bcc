"""
Pydantic schema definitions for API payloads.

Each domain (users, stores, ratings, authentication, dashboards)
defines its own Pydantic models for request and response bodies.
Schemas are separated from the data store records in ``models`` to
decouple the API representation from storage; passwords never appear
in a response schema.
"""
