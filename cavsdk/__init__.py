"""Client library for the Cloud Avenue API: consoles, endpoints, sub-clients and jobs."""

__version__ = "2.0.0"