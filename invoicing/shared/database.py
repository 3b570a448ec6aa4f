"""
Database Module

This module manages the MongoDB connection and collections
for the invoicing service.

Features:
- Connection management
- Collection access
- Database initialization
- Lifecycle management

Data Model:
- Invoices

Dependencies:
- Motor for async MongoDB
- FastAPI for lifecycle
- config for connection settings

Author: Invoicing Development Team
"""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from contextlib import asynccontextmanager
from fastapi import FastAPI
import asyncio
import logging

from invoicing.shared.config import MONGODB_URL, MONGODB_DB_NAME, MONGO_SETTINGS

logger = logging.getLogger(__name__)

# Create client
async_client = AsyncIOMotorClient(MONGODB_URL, **MONGO_SETTINGS)

# Database references
invoicing_db = async_client[MONGODB_DB_NAME]

# Invoicing Collections
invoices_collection = invoicing_db["invoices"]

async def init_db():
    """
    Initialize database connection.

    Returns:
        bool: Connection status

    Notes:
        - Retries connection
        - Validates ping
        - Ensures counter indexes
    """
    retry_count = 3
    retry_delay = 5  # seconds

    for attempt in range(retry_count):
        try:
            logger.info(f"Database initialization attempt {attempt + 1}/{retry_count}...")
            await async_client.admin.command('ping')
            logger.info("MongoDB ping successful")
            await invoices_collection.create_index([("invoice_date", ASCENDING)])
            await invoices_collection.create_index([("customer_id", ASCENDING), ("invoice_date", ASCENDING)])
            return True
        except Exception as e:
            logger.warning(f"Database connection attempt {attempt + 1} failed: {e}")
            if attempt < retry_count - 1:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
            else:
                logger.error("All connection attempts failed")
                return False

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage database lifecycle.

    Args:
        app: FastAPI application

    Yields:
        None
    """
    logger.info("Starting database initialization...")
    success = await init_db()
    if not success:
        raise RuntimeError("Failed to initialize database")
    logger.info("Database initialization complete")

    yield

    logger.info("Shutting down database connections...")
    async_client.close()
    logger.info("Database connections closed")

# Export collections and utilities
__all__ = [
    'async_client',
    'invoicing_db',
    'invoices_collection',
    'lifespan',
    'init_db'
]
