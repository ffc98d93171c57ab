"""Persistence for memberfiles: file records and the access log."""
