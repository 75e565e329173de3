"""
Database Package for blobstash.

This package handles all database-related operations including:
- The `entries` table definition using SQLAlchemy ORM
- Async engine and pooled session management
- Schema preparation at startup
"""
