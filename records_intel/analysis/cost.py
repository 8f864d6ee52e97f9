"""Per-call cost computation and budget enforcement."""

from decimal import ROUND_CEILING, Decimal

import structlog

logger = structlog.get_logger(__name__)

CENT_PRECISION = Decimal("0.01")
TOKENS_PER_RATE_UNIT = Decimal(1_000_000)


class CostTracker:
    """Prices model calls and tracks cumulative spend against a cap.

    The cap is checked before a call, never after: a run at 499 of 500
    cents still makes its next call, so realized spend may pass the cap by
    at most one call.

    Args:
        input_cost_per_million: Cents per million input tokens.
        output_cost_per_million: Cents per million output tokens.
        budget_cents: Spend cap in cents. None means uncapped.
        spent_cents: Spend already recorded in the accounting period.
    """

    def __init__(
        self,
        input_cost_per_million: float,
        output_cost_per_million: float,
        budget_cents: float | None = None,
        spent_cents: float = 0.0,
    ) -> None:
        self._input_rate = Decimal(str(input_cost_per_million))
        self._output_rate = Decimal(str(output_cost_per_million))
        self.budget_cents = budget_cents
        self.spent_cents = spent_cents

    def cost(self, input_tokens: int, output_tokens: int) -> float:
        """Cost of one call in cents, rounded up to the next 0.01 cent.

        Decimal arithmetic keeps the ceiling exact: 1M input tokens at
        0.27 costs exactly 0.27, not 0.28.
        """
        exact = (
            Decimal(input_tokens) / TOKENS_PER_RATE_UNIT * self._input_rate
            + Decimal(output_tokens) / TOKENS_PER_RATE_UNIT * self._output_rate
        )
        return float(exact.quantize(CENT_PRECISION, rounding=ROUND_CEILING))

    def can_spend(self) -> bool:
        """Whether another paid call may start."""
        return self.budget_cents is None or self.spent_cents < self.budget_cents

    def record(self, cost_cents: float) -> float:
        """Add a realized cost and return the new cumulative spend."""
        self.spent_cents += cost_cents
        if not self.can_spend():
            logger.info(
                "budget_cap_reached",
                spent_cents=round(self.spent_cents, 2),
                budget_cents=self.budget_cents,
            )
        return self.spent_cents

    @property
    def remaining_cents(self) -> float | None:
        if self.budget_cents is None:
            return None
        return max(self.budget_cents - self.spent_cents, 0.0)
