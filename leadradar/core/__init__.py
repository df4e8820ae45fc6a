"""Configuration, logging, enums and exceptions."""
