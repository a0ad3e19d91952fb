"""Credential hygiene engine: audits stored credentials and cleans up duplicates."""
