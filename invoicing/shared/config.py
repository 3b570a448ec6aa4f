"""
Configuration Module

This module manages application configuration settings and environment
variables for the invoicing service.

Features:
- Environment loading
- MongoDB connection settings
- Invoice number template
- Logging level
- CORS origins

Dependencies:
- certifi for SSL
- os for env
- dotenv for loading

Author: Invoicing Development Team
"""

import certifi
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# MongoDB Configuration
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "Invoicing")
MONGODB_TLS = _env_flag("MONGODB_TLS")

# MongoDB Connection Settings
MONGO_SETTINGS = {
    "serverSelectionTimeoutMS": 10000,
    "connectTimeoutMS": 20000,
    "maxPoolSize": 100,
    "retryWrites": True
}
if MONGODB_TLS:
    MONGO_SETTINGS.update({"tls": True, "tlsCAFile": certifi.where()})

# Invoice Numbering Configuration
DEFAULT_INVOICE_NUMBER_FORMAT = "{Y}/{cy,3}"
INVOICE_NUMBER_FORMAT = os.getenv("INVOICE_NUMBER_FORMAT", DEFAULT_INVOICE_NUMBER_FORMAT)

# Server Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
