"""
Invoice Management Module

This module handles invoice creation and invoice number generation.

Features:
- Next number preview
- Invoice creation
- Invoice listing
- Invoice lookup

Data Model:
- Invoice number
- Customer identifier
- Invoice date

Security:
- Data validation
- Error handling

Dependencies:
- FastAPI for routing
- MongoDB for storage
- Pydantic for validation

Author: Invoicing Development Team
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from datetime import date
from typing import List, Optional
import logging

from invoicing.shared.database import invoices_collection
from .invoice_db import InvoiceDB
from .models import InvoiceCreate, InvoiceNumberPreview, InvoiceResponse
from .number_formatter import InvalidContext
from .number_generator import ConfigurableNumberGenerator

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"]
)

logger = logging.getLogger(__name__)


def get_invoice_db() -> InvoiceDB:
    return InvoiceDB(invoices_collection)


def get_number_generator(invoice_db: InvoiceDB = Depends(get_invoice_db)) -> ConfigurableNumberGenerator:
    return ConfigurableNumberGenerator(invoice_db)


@router.get("/next-number", response_model=InvoiceNumberPreview)
async def preview_invoice_number(
    customer_id: Optional[str] = None,
    invoice_date: Optional[date] = None,
    template: Optional[str] = None,
    generator: ConfigurableNumberGenerator = Depends(get_number_generator)
):
    """
    Preview the number the next invoice will get.

    Args:
        customer_id (Optional[str]): Customer for customer counters
        invoice_date (Optional[date]): Invoice date, defaults to today
        template (Optional[str]): Template override

    Returns:
        InvoiceNumberPreview: Generator id and number

    Raises:
        HTTPException: 400 for missing context, 500 for database errors

    Notes:
        - Does not store anything, counters stay unchanged
    """
    try:
        number = await generator.get_invoice_number(
            invoice_date or date.today(),
            customer_id=customer_id,
            template=template
        )
        return InvoiceNumberPreview(generator=generator.get_id(), invoice_number=number)
    except InvalidContext as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error in preview_invoice_number: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", response_model=InvoiceResponse)
async def create_invoice(
    invoice: InvoiceCreate,
    invoice_db: InvoiceDB = Depends(get_invoice_db),
    generator: ConfigurableNumberGenerator = Depends(get_number_generator)
):
    """
    Create an invoice with the next invoice number.

    Args:
        invoice (InvoiceCreate): Customer and invoice date

    Returns:
        InvoiceResponse: The stored invoice

    Raises:
        HTTPException: 400 for missing context, 500 for database errors

    Notes:
        - Number generation and storage are not atomic, two concurrent
          requests may receive the same number
    """
    try:
        invoice_date = invoice.invoice_date or date.today()
        number = await generator.get_invoice_number(invoice_date, customer_id=invoice.customer_id)
        stored = await invoice_db.save_invoice(number, invoice.customer_id, invoice_date)
        return InvoiceResponse(**stored)
    except InvalidContext as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error in create_invoice: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("", response_model=List[InvoiceResponse])
async def list_invoices(
    customer_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    invoice_db: InvoiceDB = Depends(get_invoice_db)
):
    """List stored invoices, newest first."""
    try:
        invoices = await invoice_db.find_invoices(customer_id=customer_id, limit=limit)
        return [InvoiceResponse(**invoice) for invoice in invoices]
    except Exception as e:
        logger.error(f"Error in list_invoices: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str, invoice_db: InvoiceDB = Depends(get_invoice_db)):
    """Fetch a single invoice."""
    try:
        invoice = await invoice_db.get_invoice(invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return InvoiceResponse(**invoice)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_invoice: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))
