"""Adaptadores de infraestructura: SQLAlchemy e in-memory."""
