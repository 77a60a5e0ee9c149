"""Configuration module: exports Settings and load_config."""

from factcheck_feedback.config.loader import load_config
from factcheck_feedback.config.settings import Settings

__all__ = ["Settings", "load_config"]
