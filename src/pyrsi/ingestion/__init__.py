"""Ingestion helpers.

Raw provider payloads pass through these helpers before they reach the
typed models, so the fusion engine never sees sentinel or malformed values.
"""
