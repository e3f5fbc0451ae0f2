"""Pydantic models for response bodies produced by the pipeline."""
