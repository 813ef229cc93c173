from catalog_service.infrastructure.database.connection import DatabaseConnection
from catalog_service.infrastructure.database.mongodb.client import MongoDBClient, translate_errors

__all__ = ["DatabaseConnection", "MongoDBClient", "translate_errors"]
