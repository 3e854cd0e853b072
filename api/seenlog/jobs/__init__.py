from .progress import after_progress_recorded_job
from .summaries import recalculate_user_summary_job, regenerate_all_user_summaries_job

__all__ = [
    "after_progress_recorded_job",
    "recalculate_user_summary_job",
    "regenerate_all_user_summaries_job",
]
"""Background job modules for RQ workers and schedulers."""
