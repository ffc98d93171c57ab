"""Core authorization and configuration for memberfiles."""
