from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class OpCallMetric:
    reference: str
    duration: float  # seconds
    success: bool


@dataclass
class SecretResolutionMetrics:
    """Counters for one resolve_env_vars() run. Not thread-safe on its own."""

    total_secrets: int = 0
    successful_resolutions: int = 0
    failed_resolutions: int = 0
    op_calls: list[OpCallMetric] = field(default_factory=list)
    total_duration: float = 0.0

    def add_op_call(self, reference: str, duration: float, success: bool) -> None:
        self.op_calls.append(OpCallMetric(reference, duration, success))
        if success:
            self.successful_resolutions += 1
        else:
            self.failed_resolutions += 1

    def slowest(self, count: int = 5) -> list[OpCallMetric]:
        return sorted(self.op_calls, key=lambda c: c.duration, reverse=True)[:count]

    def log_summary(self) -> None:
        logger.info("=== Secret Resolution Performance Summary ===")
        logger.info("Total secrets processed: %d", self.total_secrets)
        logger.info("Successful resolutions: %d", self.successful_resolutions)
        logger.info("Failed resolutions: %d", self.failed_resolutions)
        logger.info("Total time: %.3fs", self.total_duration)
        if not self.op_calls:
            return
        logger.info("Average time per op call: %.3fs", self.total_duration / len(self.op_calls))
        logger.info("Slowest op calls:")
        for i, call in enumerate(self.slowest(), start=1):
            logger.info(
                "  %d. %s - %.3fs (%s)",
                i,
                call.reference,
                call.duration,
                "success" if call.success else "failed",
            )
