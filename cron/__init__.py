"""Cron package: batch jobs run against the company store (outside the API process)."""

from cron.config import config
from cron.logging import get_logger

__all__ = ["config", "get_logger"]
