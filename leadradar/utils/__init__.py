"""Shared helpers: identifiers, time, validators and fan-out."""
