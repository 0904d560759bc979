from dataclasses import dataclass
from typing import Optional

from dme_orders.commons.errors import DmeOrderError
from dme_orders.commons.logger import logger
from dme_orders.commons.note_parser import NoteParser, to_json
from dme_orders.helpers.http_transport import HttpSender
from dme_orders.parsers.models import OrderRecord


@dataclass
class SubmissionResult:
    ok: bool
    reason: Optional[str] = None
    error: Optional[DmeOrderError] = None


class OrdersService:
    def __init__(self, parser: NoteParser, sender: HttpSender):
        self.parser = parser
        self.sender = sender

    def render_order(self, record: OrderRecord) -> str:
        return to_json(record)

    async def submit(self, record: OrderRecord) -> SubmissionResult:
        """POST the record once. Transport failures come back as ok=False."""
        json_text = self.render_order(record)
        logger.info(f"Submitting order to {self.sender.url}")
        try:
            await self.sender.send(json_text)
        except DmeOrderError as ex:
            logger.error(f"Failed to submit order. {ex}")
            return SubmissionResult(ok=False, reason=str(ex), error=ex)
        logger.info("Order submitted successfully.")
        return SubmissionResult(ok=True)

    async def send_order(self, note_text: str) -> SubmissionResult:
        record = self.parser.parse(note_text)
        return await self.submit(record)
