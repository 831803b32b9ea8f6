"""Nomad Service - GraphQL extension for slots, contacts and power-ups."""

__version__ = "0.1.0"
