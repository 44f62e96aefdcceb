"""Trustgate: safety filter and query router between medical models and patients."""
