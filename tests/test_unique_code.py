import re
from datetime import datetime, timezone

from unique_code import generate_unique_code, register_on_blockchain


def test_code_format():
    code = generate_unique_code(datetime(2025, 3, 7, tzinfo=timezone.utc))
    assert re.fullmatch(r"FCL-20250307-[0-9A-F]{8}", code)


def test_code_defaults_to_today():
    today = datetime.now(timezone.utc).strftime("%Y%m%d")
    assert generate_unique_code().split("-")[1] == today


def test_codes_are_random():
    assert len({generate_unique_code() for _ in range(50)}) == 50


def test_blockchain_stub():
    result = register_on_blockchain("FCL-20250307-ABCDEF12", {"order_number": "FCL-1"})
    assert result["success"] is True
    assert result["blockchain_network"] == "ethereum"
    assert re.fullmatch(r"0x[0-9a-f]{64}", result["transaction_id"])
