"""AI quiz and personality assessment service."""

__version__ = "2.0.0"
