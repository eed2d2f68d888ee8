"""
Alembic scripts that build the tables inside every tenant schema.
"""
