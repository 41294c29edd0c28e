"""Deployment environment resolution for AKS pipelines."""

__version__ = "0.1.0"
