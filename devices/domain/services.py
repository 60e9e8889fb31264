"""
Device domain services.
"""
from typing import Iterable, List


def normalize_serial_numbers(sns: Iterable[str]) -> List[str]:
    """
    Clean batch input: trim each serial number, drop blanks, and keep the
    first occurrence of repeats.
    """
    cleaned = ((sn or "").strip() for sn in sns)
    return list(dict.fromkeys(sn for sn in cleaned if sn))
