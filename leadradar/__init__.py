"""LeadRadar: Web3 business-development lead discovery and pipeline API."""

__version__ = "1.0.0"
