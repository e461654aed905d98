"""
Database package — Neo4j connection handling for the note store backend.
"""

from .neo4j_handler import Neo4jHandler

__all__ = ["Neo4jHandler"]
