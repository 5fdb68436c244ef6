"""Pydantic schemas for generation stage outputs and stored records."""
