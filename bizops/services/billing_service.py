from decimal import Decimal
from typing import List

from bizops.core.db import ConnectionManager
from bizops.core.exceptions import RecordNotFound
from bizops.models import Invoice
from bizops.services.records import invoice_records


async def list_invoices(db: ConnectionManager) -> List[Invoice]:
    return await invoice_records.list_all(db)


async def total_sales(db: ConnectionManager) -> Decimal:
    """Sum of all invoice amounts; zero when nothing has been invoiced."""
    async with db.session() as conn:
        rows = await conn.execute_query_dict("SELECT SUM(amount) AS total_sales FROM invoices")
    total = rows[0]["total_sales"] if rows else None
    if total is None:
        return Decimal("0.00")
    return Decimal(str(total)).quantize(Decimal("0.01"))


async def latest_invoice(db: ConnectionManager) -> Invoice:
    async with db.session() as conn:
        invoice = await Invoice.all().order_by("-id").first().using_db(conn)
    if invoice is None:
        raise RecordNotFound("No invoices found")
    return invoice
