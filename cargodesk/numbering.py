"""
CargoDesk - Document Numbering

Suggested document numbers used to prefill create forms. The backend stays
the numbering authority and may reject a duplicate.
"""

from datetime import datetime
from typing import Optional


def GenerateAutoNumber(now: Optional[datetime] = None) -> str:
    """Local time as YYYYMMDDHHmm (e.g., 202510231710)"""
    now = now or datetime.now()
    return now.strftime("%Y%m%d%H%M")


def GenerateJobNumber(prefix: str = "JOB", now: Optional[datetime] = None) -> str:
    return f"{prefix}-{GenerateAutoNumber(now)}"


def GenerateMasterAwbNumber(prefix: str = "MAWB", now: Optional[datetime] = None) -> str:
    return f"{prefix}-{GenerateAutoNumber(now)}"


def GenerateHouseAwbNumber(prefix: str = "HAWB", now: Optional[datetime] = None) -> str:
    return f"{prefix}-{GenerateAutoNumber(now)}"
