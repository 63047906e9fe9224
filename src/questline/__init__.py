"""Questline - sequential LLM agent pipeline with a progression ledger."""

__version__ = "0.3.0"
