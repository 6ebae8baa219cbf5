"""Pydantic models for articles and settings."""
