"""Spreadsheet webhook notifications for placed orders."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import httpx

from ..domain.errors import NotificationError
from ..repos_sqlalchemy.orders_repo_sql import OrderHeader, OrderLine
from ..utils.webhook_signing import signature_headers

logger = logging.getLogger("storefront.notifications")


def _describe(line: OrderLine) -> str:
    text = f"{line.name_snapshot} x{line.qty}"
    choices = [entry["choice"] for entry in line.options_snapshot or []]
    if choices:
        text += f" ({', '.join(choices)})"
    if line.notes:
        text += f" [{line.notes}]"
    return text


def order_summary(header: OrderHeader, lines: Sequence[OrderLine]) -> dict[str, Any]:
    """Return the flat, human readable row sent to the sheet."""

    return {
        "order_code": header.order_code,
        "customer_name": header.customer_name,
        "phone": header.phone,
        "pickup_date": header.pickup_date.isoformat() if header.pickup_date else "",
        "items_join": "; ".join(_describe(line) for line in lines),
        "subtotal": int(header.subtotal),
        "discount": int(header.discount),
        "service_fee": int(header.service_fee),
        "total": int(header.total),
        "payment_method": header.payment_method,
        "status": header.status,
        "notes": header.notes or "",
    }


class SheetsNotifier:
    """POST order summaries to a spreadsheet webhook.

    When ``secret`` is set the body is signed and the signature sent in
    ``X-Signature`` with the timestamp in ``X-Timestamp``.
    """

    def __init__(
        self,
        url: str | None,
        *,
        secret: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.secret = secret
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def send(self, summary: dict[str, Any]) -> None:
        """Deliver ``summary``; raise :class:`NotificationError` on failure."""

        if not self.url:
            return
        body = json.dumps(summary, separators=(",", ":")).encode()
        headers = {"Content-Type": "application/json"}
        if self.secret:
            headers.update(signature_headers(self.secret, body))
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                resp = await client.post(self.url, content=body, headers=headers)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NotificationError(f"sheet webhook failed: {exc}") from exc
        logger.info(
            "sheet webhook delivered order=%s status=%s",
            summary.get("order_code"),
            resp.status_code,
        )


__all__ = ["SheetsNotifier", "order_summary"]
