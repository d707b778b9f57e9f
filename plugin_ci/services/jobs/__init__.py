"""Per-stage job folders."""

from .folders import Job, JobFolderManager, sanitize_job_name

__all__ = ["Job", "JobFolderManager", "sanitize_job_name"]
