"""
Invoice Database Management Module

This module provides database operations for invoices, including the
counter reads the invoice number templates are resolved against.

Features:
- Invoice storage
- Invoice listing
- Period counters
- Customer counters

Data Model:
- Invoice number
- Customer identifier
- Invoice date
- Creation timestamp

Dependencies:
- MongoDB for storage
- datetime for periods
- logging for tracking
- typing for type hints

Author: Invoicing Development Team
"""

from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional, Tuple
import logging

from bson import ObjectId
from pymongo import DESCENDING

from invoicing.shared.models import CounterScope

logger = logging.getLogger(__name__)


def as_datetime(value: date) -> datetime:
    """Normalize a date to midnight, MongoDB stores datetimes only."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def period_bounds(scope: CounterScope, reference_date: date) -> Optional[Tuple[datetime, datetime]]:
    """
    Calendar period containing the reference date.

    Args:
        scope (CounterScope): Period size
        reference_date (date): Date inside the period

    Returns:
        Optional[Tuple[datetime, datetime]]: Half open [start, end) range,
        None for the all time scope
    """
    day = reference_date.date() if isinstance(reference_date, datetime) else reference_date

    if scope == CounterScope.ALL:
        return None
    if scope == CounterScope.YEAR:
        start = date(day.year, 1, 1)
        end = date(day.year + 1, 1, 1)
    elif scope == CounterScope.MONTH:
        start = date(day.year, day.month, 1)
        if day.month == 12:
            end = date(day.year + 1, 1, 1)
        else:
            end = date(day.year, day.month + 1, 1)
    elif scope == CounterScope.DAY:
        start = day
        end = date.fromordinal(day.toordinal() + 1)
    else:
        raise ValueError(f"Unknown counter scope: {scope}")

    return as_datetime(start), as_datetime(end)


class InvoiceDB:
    """
    Invoice database operations handler.

    Attributes:
        collection: MongoDB collection for invoices
    """

    def __init__(self, collection):
        """Initialize with the invoices collection."""
        self.collection = collection

    def counter_filter(self, scope: CounterScope, reference_date: date, customer_id: Optional[str] = None) -> Dict:
        """Build the query matching the invoices a counter counts."""
        query = {}
        if customer_id is not None:
            query["customer_id"] = customer_id
        bounds = period_bounds(scope, reference_date)
        if bounds is not None:
            start, end = bounds
            query["invoice_date"] = {"$gte": start, "$lt": end}
        return query

    async def get_counter(self, scope: CounterScope, reference_date: date, customer_id: Optional[str] = None) -> int:
        """
        Count stored invoices for a counter scope.

        Args:
            scope (CounterScope): Counter period
            reference_date (date): Date selecting the period
            customer_id (Optional[str]): Restrict to one customer

        Returns:
            int: Number of invoices, i.e. the last used counter value

        Raises:
            Exception: For database errors
        """
        query = self.counter_filter(scope, reference_date, customer_id)
        try:
            count = await self.collection.count_documents(query)
            logger.debug(f"Counter {scope.value} (customer={customer_id}) is {count}")
            return count
        except Exception as e:
            logger.error(f"Error counting invoices for {scope.value}: {str(e)}")
            logger.exception("Full traceback:")
            raise

    async def save_invoice(self, invoice_number: str, customer_id: str, invoice_date: date) -> Dict:
        """
        Store a new invoice.

        Args:
            invoice_number (str): Generated invoice number
            customer_id (str): Customer identifier
            invoice_date (date): Invoice date

        Returns:
            dict: Stored invoice with its id as string

        Notes:
            - Storing advances every counter covering the invoice date
        """
        document = {
            "invoice_number": invoice_number,
            "customer_id": customer_id,
            "invoice_date": as_datetime(invoice_date),
            "created_at": datetime.now(timezone.utc)
        }
        try:
            result = await self.collection.insert_one(document)
            logger.info(f"Stored invoice {invoice_number} for customer {customer_id}")
        except Exception as e:
            logger.error(f"Error storing invoice {invoice_number}: {str(e)}")
            logger.exception("Full traceback:")
            raise

        document.pop("_id", None)
        return {"id": str(result.inserted_id), **document}

    async def find_invoices(self, customer_id: Optional[str] = None, limit: int = 100) -> List[Dict]:
        """List stored invoices, newest invoice date first."""
        query = {"customer_id": customer_id} if customer_id is not None else {}
        cursor = self.collection.find(query).sort("invoice_date", DESCENDING).limit(limit)

        invoices = []
        async for invoice in cursor:
            invoice["id"] = str(invoice.pop("_id"))
            invoices.append(invoice)
        return invoices

    async def get_invoice(self, invoice_id: str) -> Optional[Dict]:
        """Fetch one invoice by id, None for unknown or malformed ids."""
        if not ObjectId.is_valid(invoice_id):
            return None
        invoice = await self.collection.find_one({"_id": ObjectId(invoice_id)})
        if invoice:
            invoice["id"] = str(invoice.pop("_id"))
        return invoice
