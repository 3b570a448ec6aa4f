"""
Invoice Number Generator Module

Generates invoice numbers from the configured template, loading only the
counters the template references.

Author: Invoicing Development Team
"""

from datetime import date
from typing import Dict, Optional, Tuple
import logging

from invoicing.shared.config import INVOICE_NUMBER_FORMAT
from invoicing.shared.models import CounterScope
from .invoice_db import InvoiceDB
from .number_formatter import FormatContext, InvalidContext, format_number, referenced_counters

logger = logging.getLogger(__name__)


class ConfigurableNumberGenerator:
    """
    Number generator driven by a placeholder template.

    Attributes:
        invoice_db (InvoiceDB): Source of the stored counters
        template (str): Default number template
    """

    def __init__(self, invoice_db: InvoiceDB, template: Optional[str] = None):
        self.invoice_db = invoice_db
        self.template = template if template is not None else INVOICE_NUMBER_FORMAT

    def get_id(self) -> str:
        return "default"

    async def load_counters(
        self, template: str, invoice_date: date, customer_id: Optional[str]
    ) -> Dict[Tuple[CounterScope, Optional[str]], int]:
        """Read each counter the template uses once."""
        counters = {}
        for scope, customer_scoped in referenced_counters(template):
            if customer_scoped and customer_id is None:
                raise InvalidContext("Customer counters require a customer")
            owner = customer_id if customer_scoped else None
            counters[(scope, owner)] = await self.invoice_db.get_counter(scope, invoice_date, owner)
        return counters

    async def get_invoice_number(
        self,
        invoice_date: Optional[date],
        customer_id: Optional[str] = None,
        template: Optional[str] = None
    ) -> str:
        """
        Generate the next invoice number.

        Args:
            invoice_date (date): Invoice date used as reference date
            customer_id (Optional[str]): Customer for customer counters
            template (Optional[str]): Override of the configured template

        Returns:
            str: Invoice number

        Raises:
            InvalidContext: For a missing invoice date or customer
        """
        if invoice_date is None:
            raise InvalidContext("An invoice date is required")

        template = template if template is not None else self.template
        counters = await self.load_counters(template, invoice_date, customer_id)

        context = FormatContext(
            reference_date=invoice_date,
            counter=lambda scope, owner: counters[(scope, owner)],
            customer_id=customer_id
        )
        number = format_number(template, context)
        logger.info(f"Generated invoice number {number} from template {template}")
        return number
