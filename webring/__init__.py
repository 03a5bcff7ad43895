"""Webring directory service."""
