"""Derived business metrics and grade ranking."""

from .derived import derive_metrics
from .grades import grade_rank, sort_classifications

__all__ = ["derive_metrics", "grade_rank", "sort_classifications"]
