"""
Slack notification utilities for MarketDesk.
Handles bulk import failure alerts and low-stock alerts raised by order imports.
"""
import logging
import requests

from ..config import settings

logger = logging.getLogger(__name__)


def _post(payload: dict) -> bool:
    if not settings.slack_webhook_url:
        logger.warning("SLACK_WEBHOOK_URL not configured; skipping notification")
        return False
    try:
        resp = requests.post(
            settings.slack_webhook_url,
            json=payload,
            timeout=10,
        )
        resp.raise_for_status()
        return True
    except requests.RequestException as exc:
        logger.error("Slack notification failed: %s", exc)
        return False


def notify_import_failure(account_id: int, source_type: str, file_name: str, error: str) -> bool:
    text = (
        f"🚨 *Bulk Import Failed*\n"
        f"Account: {account_id} | Source: {source_type}\n"
        f"File: {file_name}\n"
        f"Error: {error}\n"
        f"No rows were imported."
    )
    return _post({"text": text})


def notify_low_stock(
    account_id: int,
    product_name: str,
    sku: str,
    available: int,
    threshold: int,
) -> bool:
    text = (
        f"⚠️ *Low Stock Alert*\n"
        f"Product: {product_name} (`{sku}`)\n"
        f"Account: {account_id}\n"
        f"Available Stock: {available} (Threshold: {threshold})\n"
        f"*Action Required: Restock soon*"
    )
    return _post({"text": text})
