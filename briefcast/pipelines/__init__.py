"""Orchestrated pipelines."""
