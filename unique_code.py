import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

CODE_PREFIX = "FCL"


def generate_unique_code(when: Optional[datetime] = None) -> str:
    """
    Generate the code handed to a customer once their order is paid.

    Format: FCL-YYYYMMDD-XXXXXXXX (UTC date, 8 uppercase hex chars).
    Codes are not checked against previously issued ones.
    """
    when = when or datetime.now(timezone.utc)
    return f"{CODE_PREFIX}-{when.strftime('%Y%m%d')}-{secrets.token_hex(4).upper()}"


def register_on_blockchain(unique_code: str, metadata: dict) -> dict:
    """Stand-in for on-chain registration of a unique code; nothing is submitted."""
    tx_id = f"0x{secrets.token_hex(32)}"
    logger.info(f"Registering unique code {unique_code} on blockchain (mock tx {tx_id}), metadata={metadata}")
    return {
        "success": True,
        "transaction_id": tx_id,
        "blockchain_network": "ethereum",
    }
