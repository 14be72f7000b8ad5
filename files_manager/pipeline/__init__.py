"""Background job pipelines."""

from files_manager.pipeline.jobs import ThumbnailJobHandler, WelcomeJobHandler
from files_manager.pipeline.queue import DeadLetter, Job, JobEvent, JobPipeline, JobState

__all__ = [
    "DeadLetter",
    "Job",
    "JobEvent",
    "JobPipeline",
    "JobState",
    "ThumbnailJobHandler",
    "WelcomeJobHandler",
]
