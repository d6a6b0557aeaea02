"""
Metrics and observability for analytics tool invocations.
"""

from collections import Counter
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class ToolInvocationMetrics:
    """Track metrics for analytics tool calls."""

    def __init__(self):
        self.total_requests = 0
        self.successful_invocations = 0
        self.failed_invocations = 0
        self.total_processing_time = 0.0
        self.invocations_by_tool = Counter()
        self.users_analyzed = set()

    def record_invocation(
        self,
        tool: str,
        processing_time: float,
        success: bool = True,
        user_id: Optional[str] = None,
    ):
        """Record a tool invocation."""
        self.total_requests += 1
        self.invocations_by_tool[tool] += 1
        self.total_processing_time += processing_time
        if user_id:
            self.users_analyzed.add(user_id)

        if success:
            self.successful_invocations += 1
        else:
            self.failed_invocations += 1

        logger.info(
            f"Metrics: tool={tool}, requests={self.total_requests}, "
            f"success={self.successful_invocations}, "
            f"failures={self.failed_invocations}, "
            f"avg_time={self.get_average_processing_time():.3f}s"
        )

    def get_average_processing_time(self) -> float:
        """Get average processing time in seconds."""
        if self.total_requests == 0:
            return 0.0
        return self.total_processing_time / self.total_requests

    def get_stats(self) -> Dict[str, Any]:
        """Get current statistics."""
        return {
            'total_requests': self.total_requests,
            'successful_invocations': self.successful_invocations,
            'failed_invocations': self.failed_invocations,
            'invocations_by_tool': dict(self.invocations_by_tool),
            'unique_users': len(self.users_analyzed),
            'average_processing_time_seconds': self.get_average_processing_time(),
            'success_rate': (
                self.successful_invocations / self.total_requests
                if self.total_requests > 0 else 0.0
            )
        }


# Global metrics instance
metrics = ToolInvocationMetrics()
