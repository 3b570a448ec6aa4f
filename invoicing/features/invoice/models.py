"""
Invoice Data Models Module

This module defines the request and response models of the invoice API.

Features:
- Invoice creation
- Invoice responses
- Number previews

Dependencies:
- Pydantic for validation
- datetime for dates
- typing for type hints

Author: Invoicing Development Team
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

class InvoiceCreate(BaseModel):
    """
    Invoice creation model.

    Attributes:
        customer_id (str): Customer identifier
        invoice_date (Optional[date]): Invoice date, defaults to today
    """
    customer_id: str = Field(..., min_length=1)
    invoice_date: Optional[date] = None

class InvoiceResponse(BaseModel):
    """
    Stored invoice model.

    Attributes:
        id (str): Invoice identifier
        invoice_number (str): Generated number
        customer_id (str): Customer identifier
        invoice_date (datetime): Invoice date
        created_at (datetime): Creation timestamp
    """
    id: str
    invoice_number: str
    customer_id: str
    invoice_date: datetime
    created_at: datetime

class InvoiceNumberPreview(BaseModel):
    """Next invoice number without storing an invoice."""
    generator: str
    invoice_number: str
