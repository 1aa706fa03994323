"""
Database module initialization
"""

from .mongodb import connect_to_mongo, close_mongo_connection, create_indexes, get_database, db

__all__ = ["connect_to_mongo", "close_mongo_connection", "create_indexes", "get_database", "db"]
