"""Contractor directory for RenoQuote.

Static list of contractors offered on every project. Read-only.
"""

from typing import Dict, List, Optional

from config.errors import ErrorCode, RenoQuoteError
from models.contractor import Contractor

MOCK_CONTRACTORS: List[Contractor] = [
    Contractor(
        id="contractor-1",
        name="Mike Johnson",
        hourly_rate=65,
        rating=4.9,
        completed_jobs=127,
        specialties=["Deck Refresh", "Outdoor Projects"],
        availability="2 days",
        distance="3.2 miles",
        reviews=89,
        tier="gold",
        commission_rate=15,
        phone="(555) 123-4567",
        email="mike.j@example.com",
    ),
    Contractor(
        id="contractor-2",
        name="Sarah Wilson",
        hourly_rate=55,
        rating=4.8,
        completed_jobs=94,
        specialties=["Garden Design", "Landscaping"],
        availability="1 week",
        distance="5.1 miles",
        reviews=72,
        tier="silver",
        commission_rate=20,
        phone="(555) 234-5678",
        email="sarah.w@example.com",
    ),
    Contractor(
        id="contractor-3",
        name="David Chen",
        hourly_rate=75,
        rating=4.7,
        completed_jobs=156,
        specialties=["Pressure Washing", "Maintenance"],
        availability="3 days",
        distance="7.8 miles",
        reviews=134,
        tier="bronze",
        commission_rate=25,
        phone="(555) 345-6789",
        email="david.c@example.com",
    ),
]

_BY_ID: Dict[str, Contractor] = {c.id: c for c in MOCK_CONTRACTORS}


def list_contractors() -> List[Contractor]:
    return list(MOCK_CONTRACTORS)


def find_contractor(contractor_id: str) -> Optional[Contractor]:
    return _BY_ID.get(contractor_id)


def get_contractor(contractor_id: str) -> Contractor:
    """Fetch a contractor by id.

    Raises:
        RenoQuoteError: CONTRACTOR_NOT_FOUND if the id is unknown.
    """
    contractor = _BY_ID.get(contractor_id)
    if contractor is None:
        raise RenoQuoteError(
            code=ErrorCode.CONTRACTOR_NOT_FOUND,
            message=f"Contractor '{contractor_id}' not found",
            details={"contractor_id": contractor_id},
        )
    return contractor
