"""Takeoff orchestration: the pipeline and its request handlers."""
