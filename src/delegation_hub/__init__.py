"""Delegation Hub: trigger the email-to-Slack delegation workflow and track its runs."""

__version__ = "0.1.0"
