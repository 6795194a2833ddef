# emprende/utils.py
"""Shared utilities: logging setup and small time helpers."""
import os
import logging
import time
from dotenv import load_dotenv

load_dotenv()

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("emprende")


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 only encodes non-negative integers")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_DIGITS[rem])
    return "".join(reversed(digits))
