"""PageScan: local, heuristic phishing checks over an already-loaded page."""

__version__ = "1.0.0"
