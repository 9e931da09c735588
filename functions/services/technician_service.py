"""Technician earnings for RenoQuote.

Commission tiers and job earnings summaries shown on a technician's
profile. Payouts go through the same commission split as
fee_service.calculate_technician_payout.

Only the gold (15%) and new (33%) rates come from the product; silver (20%)
and bronze (25%) are assumed values stepping between them.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional

import structlog
from pydantic import BaseModel, Field

from config.errors import ErrorCode, ValidationError
from models.contractor import TechnicianTier
from services.fee_service import calculate_technician_payout

logger = structlog.get_logger(__name__)

# Commission retained by the platform, percent of project total
TIER_COMMISSION_RATES: Dict[str, int] = {
    TechnicianTier.GOLD.value: 15,
    TechnicianTier.SILVER.value: 20,
    TechnicianTier.BRONZE.value: 25,
    TechnicianTier.NEW.value: 33,
}


class TechnicianJob(BaseModel):
    """A job on a technician's schedule; `earnings` is the project total."""

    id: str
    title: str
    status: str = Field(description="scheduled, in-progress or completed")
    client: Optional[str] = None
    date: Optional[str] = None
    earnings: float = Field(ge=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)


class EarningsSummary(BaseModel):
    """Aggregate earnings over a set of jobs."""

    commission_rate: float = Field(alias="commissionRate")
    gross_total: int = Field(alias="grossTotal")
    platform_commission: int = Field(alias="platformCommission")
    technician_payout: int = Field(alias="technicianPayout")
    completed_payout: int = Field(alias="completedPayout")
    job_count: int = Field(alias="jobCount")
    jobs_by_status: Dict[str, int] = Field(default_factory=dict, alias="jobsByStatus")
    average_rating: Optional[float] = Field(default=None, alias="averageRating")

    class Config:
        populate_by_name = True


def commission_rate_for_tier(tier: str) -> int:
    """Commission percentage for a technician tier.

    Raises:
        ValidationError: If the tier is unknown.
    """
    key = tier.value if isinstance(tier, TechnicianTier) else str(tier).lower()
    if key not in TIER_COMMISSION_RATES:
        raise ValidationError(
            message=f"Unknown technician tier '{tier}'",
            field="tier",
            code=ErrorCode.INVALID_FIELD,
        )
    return TIER_COMMISSION_RATES[key]


def summarize_technician_jobs(jobs: Iterable[TechnicianJob], commission_rate: float) -> EarningsSummary:
    """Summarize earnings and payouts over a technician's jobs.

    Each job is split individually so that the summed payout matches what
    the technician is paid per job.
    """
    job_list: List[TechnicianJob] = list(jobs)
    gross = commission = payout = completed_payout = 0
    for job in job_list:
        split = calculate_technician_payout(job.earnings, commission_rate)
        gross += split.platform_commission + split.technician_payout
        commission += split.platform_commission
        payout += split.technician_payout
        if job.status == "completed":
            completed_payout += split.technician_payout

    ratings = [job.rating for job in job_list if job.rating is not None]
    summary = EarningsSummary(
        commission_rate=commission_rate,
        gross_total=gross,
        platform_commission=commission,
        technician_payout=payout,
        completed_payout=completed_payout,
        job_count=len(job_list),
        jobs_by_status=dict(Counter(job.status for job in job_list)),
        average_rating=round(sum(ratings) / len(ratings), 2) if ratings else None,
    )
    logger.debug("technician_earnings_summarized", job_count=summary.job_count, payout=payout)
    return summary
