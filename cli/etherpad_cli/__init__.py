"""Diagnostics CLI for the etherpad client settings."""
