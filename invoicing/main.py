"""
Main Application Module

This module serves as the FastAPI application entry point,
configuring logging, middleware and routes.

Features:
- Route management
- CORS configuration
- Request logging
- Development server

Dependencies:
- FastAPI for API
- CORS middleware
- uvicorn for server
- Database lifespan
- Logging

Author: Invoicing Development Team
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from invoicing.shared.config import LOG_LEVEL, CORS_ORIGINS
from invoicing.shared.database import lifespan
from invoicing.features.invoice.routes_invoice import router as invoice_router

# Set up logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add routers
logger.info("Mounting API routers...")
app.include_router(invoice_router)

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "invoicing.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=LOG_LEVEL.lower()
    )
