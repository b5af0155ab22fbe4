"""Pawl plan worker - drive one planning session and persist the plan."""

__version__ = "0.1.0"
