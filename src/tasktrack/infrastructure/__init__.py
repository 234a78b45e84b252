"""Infrastructure layer — database, document store, password hashing.

This layer depends on stdlib, third-party libs (SQLAlchemy, bcrypt) and
the domain contracts it implements. It must never import from services,
commands, or output. Services bridge between domain rules and storage.
"""
