"""
MongoDB database connection and configuration
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from typing import Optional

from app.core.config import config
from app.core.errors import ErrorResponse
from app.core.logger import logger

CATEGORY_COLLECTION = "categories"
PRODUCT_COLLECTION = "products"


class Database:
    """Database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database: Optional[AsyncIOMotorDatabase] = None


db = Database()


async def connect_to_mongo():
    """Create database connection"""
    logger.info("Connecting to MongoDB...")

    try:
        db.client = AsyncIOMotorClient(config.mongodb_url)
        db.database = db.client[config.mongodb_database]

        # Test connection
        await db.client.admin.command('ping')

        logger.info(
            f"Successfully connected to MongoDB database '{config.mongodb_database}'",
            metadata={
                "event": "mongodb_connected",
                "database": config.mongodb_database,
                "host": config.mongodb_host,
                "port": config.mongodb_port
            }
        )
    except PyMongoError as e:
        logger.error(
            f"Could not connect to MongoDB: {e}",
            metadata={"event": "mongodb_connection_error", "error": str(e)}
        )
        raise ErrorResponse(
            f"Could not connect to MongoDB: {e}",
            status_code=503
        )


async def close_mongo_connection():
    """Close database connection"""
    logger.info("Closing connection to MongoDB...")
    if db.client is not None:
        db.client.close()
        db.client = None
        db.database = None


async def get_database() -> AsyncIOMotorDatabase:
    """Get database instance"""
    if db.database is None:
        await connect_to_mongo()
    return db.database


async def ping_database() -> bool:
    """Return True when the server answers a ping"""
    if db.client is None:
        return False
    try:
        await db.client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}", metadata={"event": "mongodb_ping_failed"})
        return False


def get_category_collection(database: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Get categories collection"""
    return database[CATEGORY_COLLECTION]


def get_product_collection(database: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Get products collection"""
    return database[PRODUCT_COLLECTION]


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the catalog relies on.

    Name uniqueness is enforced here rather than by application checks, so
    concurrent creates race on the index and the loser gets a duplicate key error.
    """
    categories = get_category_collection(database)
    products = get_product_collection(database)

    try:
        await categories.create_index([("name", ASCENDING)], unique=True, name="idx_category_name_unique")
        await categories.create_index([("productId", ASCENDING)], name="idx_category_product_ids")
        logger.info("Created indexes on 'categories'")

        await products.create_index([("name", ASCENDING)], unique=True, name="idx_product_name_unique")
        await products.create_index([("categoryId", ASCENDING)], name="idx_product_category")
        logger.info("Created indexes on 'products'")

    except PyMongoError as e:
        logger.error(f"Failed to create database indexes: {str(e)}", error=e)
        raise
