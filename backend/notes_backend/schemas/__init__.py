"""Pydantic request parsers and response envelopes (the API contract)."""
