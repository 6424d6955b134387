"""
Database access layer (async SQLAlchemy sessions).
"""
