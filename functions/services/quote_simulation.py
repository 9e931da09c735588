"""
Quote Simulation for RenoQuote.

Given a base estimate and the contractors a customer selects, produces the
per-contractor asking price and, after a simulated response delay, a
"received" quote whose total is perturbed by up to +/- QUOTE_VARIANCE.

State machine:
- session: NOT_REQUESTED -> REQUESTED (only with a non-empty selection)
- per contractor: PENDING -> RECEIVED -> FINALIZED

Quotes are created once per contractor; requesting again only adds
contractors that have not been asked yet. The response delay runs as an
abortable task keyed by project id.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import numpy as np
import structlog

from config.errors import ErrorCode, QuoteStateError
from config.settings import settings
from models.activity import ActivityAction
from models.contractor import Contractor
from models.estimate import ContractorPricing, Estimate
from models.quote import Quote, QuoteRequestResult, QuoteSessionState, QuoteStatus
from services.activity_sink import ActivitySink, LoggingActivitySink
from services.contractor_directory import get_contractor, list_contractors
from services.fee_service import calculate_contractor_total
from utils.numbers import round_half_up
from utils.task_registry import KeyedTaskRegistry

logger = structlog.get_logger(__name__)

NO_SELECTION_MESSAGE = "Please select at least one contractor to request quotes from."


def perturb_total(total: float, rng: np.random.Generator, variance: float) -> int:
    """Apply a uniform +/- `variance` perturbation to a quote total."""
    variation = (rng.random() - 0.5) * 2 * variance
    return round_half_up(total * (1 + variation))


class QuoteSession:
    """Quote request workflow for one project."""

    def __init__(
        self,
        project_id: str,
        estimate: Estimate,
        contractors: Optional[List[Contractor]] = None,
        activity_sink: Optional[ActivitySink] = None,
        rng: Optional[np.random.Generator] = None,
        delay_seconds: Optional[float] = None,
        variance: Optional[float] = None,
        validity_days: Optional[int] = None,
        user_id: Optional[str] = None,
        tasks: Optional[KeyedTaskRegistry] = None,
    ):
        self.project_id = project_id
        self.estimate = estimate
        self.contractors: Dict[str, Contractor] = {
            c.id: c for c in (contractors if contractors is not None else list_contractors())
        }
        self.activity_sink = activity_sink or LoggingActivitySink()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.delay_seconds = settings.quote_latency_seconds if delay_seconds is None else delay_seconds
        self.variance = settings.quote_variance if variance is None else variance
        self.validity_days = settings.quote_validity_days if validity_days is None else validity_days
        self.user_id = user_id
        self._tasks = tasks or KeyedTaskRegistry()

        self.state = QuoteSessionState.NOT_REQUESTED
        self.selected: List[str] = []
        self.statuses: Dict[str, QuoteStatus] = {}
        self.asking_prices: Dict[str, ContractorPricing] = {}
        self.quotes: Dict[str, Quote] = {}
        self.finalized_contractor_id: Optional[str] = None

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    def _contractor(self, contractor_id: str) -> Contractor:
        contractor = self.contractors.get(contractor_id)
        if contractor is None:
            # Raises CONTRACTOR_NOT_FOUND for ids outside the directory
            contractor = get_contractor(contractor_id)
        return contractor

    def pricing_for(self, contractor_id: str) -> ContractorPricing:
        """Asking price of one contractor, derived from the current estimate."""
        return calculate_contractor_total(self.estimate, self._contractor(contractor_id).hourly_rate)

    def contractor_pricing(self) -> Dict[str, ContractorPricing]:
        return {cid: self.pricing_for(cid) for cid in self.contractors}

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle_contractor(self, contractor_id: str) -> bool:
        """Select or deselect a contractor; returns True if now selected."""
        self._contractor(contractor_id)
        if contractor_id in self.selected:
            self.selected.remove(contractor_id)
            selected = False
        else:
            self.selected.append(contractor_id)
            selected = True

        self._emit(ActivityAction.CONTRACTOR_SELECTED, {
            "contractorId": contractor_id,
            "selected": selected,
        })
        return selected

    # -------------------------------------------------------------------------
    # Request / receive
    # -------------------------------------------------------------------------

    async def request_quotes(self, contractor_ids: Optional[Iterable[str]] = None) -> QuoteRequestResult:
        """Ask the selected (or given) contractors for quotes.

        An empty selection is rejected with a user-facing message and leaves
        the session state unchanged.
        """
        ids = list(contractor_ids) if contractor_ids is not None else list(self.selected)
        if not ids:
            logger.info("quote_request_rejected", project_id=self.project_id, reason="no_contractors")
            return QuoteRequestResult(
                accepted=False,
                message=NO_SELECTION_MESSAGE,
                state=self.state,
                error_code=ErrorCode.NO_CONTRACTORS_SELECTED,
            )

        for contractor_id in ids:
            self._contractor(contractor_id)

        new_ids = [cid for cid in ids if cid not in self.statuses]
        asking_prices: Dict[str, ContractorPricing] = {}
        for contractor_id in new_ids:
            self.statuses[contractor_id] = QuoteStatus.PENDING
            asking_prices[contractor_id] = self.pricing_for(contractor_id)
            self.asking_prices[contractor_id] = asking_prices[contractor_id]

        self.state = QuoteSessionState.REQUESTED
        self._emit(ActivityAction.QUOTES_REQUESTED, {
            "selectedContractors": ids,
            "newContractors": new_ids,
            "baseEstimate": {
                "total": self.estimate.total,
                "materialCost": self.estimate.material_cost,
                "laborHours": self.estimate.labor_hours,
            },
        })

        pending = [cid for cid, status in self.statuses.items() if status == QuoteStatus.PENDING]
        if pending:
            # Replaces any in-flight response task; the new one covers all pending contractors
            self._tasks.schedule(self.project_id, self._receive_quotes(pending))

        logger.info(
            "quotes_requested",
            project_id=self.project_id,
            contractors=ids,
            new_contractors=new_ids,
        )
        return QuoteRequestResult(
            accepted=True,
            message=f"Quotes requested from {len(ids)} contractor(s).",
            state=self.state,
            asking_prices=asking_prices,
        )

    async def _receive_quotes(self, contractor_ids: List[str]) -> Dict[str, Quote]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        received: Dict[str, Quote] = {}
        for contractor_id in contractor_ids:
            if self.statuses.get(contractor_id) != QuoteStatus.PENDING:
                continue
            quote = self._build_quote(contractor_id)
            self.quotes[contractor_id] = quote
            self.statuses[contractor_id] = QuoteStatus.RECEIVED
            received[contractor_id] = quote

        if received:
            self._emit(ActivityAction.QUOTES_RECEIVED, {
                "quotes": {cid: q.to_dict() for cid, q in received.items()},
            })
            logger.info("quotes_received", project_id=self.project_id, count=len(received))
        return received

    def _build_quote(self, contractor_id: str) -> Quote:
        contractor = self._contractor(contractor_id)
        # Perturbs the asking price recorded when the quote was requested
        asking = self.asking_prices.get(contractor_id) or self.pricing_for(contractor_id)
        data = asking.model_dump()
        data.update(
            total=perturb_total(asking.total, self.rng, self.variance),
            contractor_id=contractor_id,
            message=f"Available {contractor.availability}. Quote valid for {self.validity_days} days.",
            confirmed=True,
            responded_at=datetime.now(timezone.utc),
        )
        return Quote(**data)

    async def wait_for_quotes(self) -> Dict[str, Quote]:
        """Wait for the in-flight response task, if any, and return all received quotes."""
        task = self._tasks.get(self.project_id)
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                logger.info("quote_wait_cancelled", project_id=self.project_id)
        return dict(self.quotes)

    def cancel(self) -> bool:
        """Abort the pending responses; contractors already asked stay PENDING."""
        return self._tasks.cancel(self.project_id)

    # -------------------------------------------------------------------------
    # Finalize
    # -------------------------------------------------------------------------

    def finalize_contractor(self, contractor_id: str) -> Quote:
        """Accept one contractor's received quote.

        Raises:
            QuoteStateError: If no quote has been received from the contractor,
                or a contractor has already been finalized.
        """
        if self.finalized_contractor_id is not None:
            raise QuoteStateError(
                code=ErrorCode.QUOTE_ALREADY_FINALIZED,
                message=f"Contractor '{self.finalized_contractor_id}' is already finalized",
                contractor_id=contractor_id,
            )
        if self.statuses.get(contractor_id) != QuoteStatus.RECEIVED:
            raise QuoteStateError(
                code=ErrorCode.QUOTE_NOT_RECEIVED,
                message=f"No quote received from contractor '{contractor_id}'",
                contractor_id=contractor_id,
                details={"status": self.statuses.get(contractor_id)},
            )

        contractor = self._contractor(contractor_id)
        quote = self.quotes[contractor_id]
        self.statuses[contractor_id] = QuoteStatus.FINALIZED
        self.finalized_contractor_id = contractor_id

        self._emit(ActivityAction.CONTRACTOR_FINALIZED, {
            "contractorId": contractor_id,
            "contractor": contractor.name,
            "finalQuote": quote.to_dict(),
        })
        logger.info("contractor_finalized", project_id=self.project_id, contractor_id=contractor_id)
        return quote

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def lowest_quote(self) -> Optional[int]:
        if not self.quotes:
            return None
        return min(q.total for q in self.quotes.values())

    def highest_quote(self) -> Optional[int]:
        if not self.quotes:
            return None
        return max(q.total for q in self.quotes.values())

    def _emit(self, action: str, payload: Dict) -> None:
        self.activity_sink.emit(
            action,
            {**payload, "projectId": self.project_id, "userId": self.user_id or "anonymous"},
            user_id=self.user_id,
            session_id=self.project_id,
        )
