"""
Feature modules live under this package.

Each module owns its models, form schemas, mutation handlers and routes, and reuses
the platform pieces (DB session, listing cache, login guard, CSRF).
"""
