# config.py
"""
Detector configuration.

Defaults live here as module constants and can be overridden from the
environment (PAGESCAN_*), the same way the API reads its settings.
The known-domains allow-list is user-editable: either a comma-separated
PAGESCAN_KNOWN_DOMAINS or a JSON list in PAGESCAN_KNOWN_DOMAINS_FILE.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger("config")

DEFAULT_KNOWN_DOMAINS: Tuple[str, ...] = (
    "senai.com.br",
    "senai.br",
    "gmail.com",
    "google.com",
    "microsoft.com",
    "outlook.com",
)
# Points removed from 100 for every suspicious check (not per finding)
DEFAULT_PENALTY = 15

DB_FILE = os.getenv("PAGESCAN_DB", "pagescan.db")
RESULTS_PAGE = "/explanation"


@dataclass(frozen=True)
class DetectorConfig:
    known_domains: Tuple[str, ...] = DEFAULT_KNOWN_DOMAINS
    penalty: int = DEFAULT_PENALTY

    def __post_init__(self):
        # lower-case once so both sides of the similarity check agree
        domains = tuple(d.strip().lower() for d in self.known_domains if d and d.strip())
        object.__setattr__(self, "known_domains", domains)
        if self.penalty < 0:
            raise ValueError("penalty must be >= 0")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default


def load_known_domains(path: str) -> List[str]:
    """Read a JSON list of domain strings from `path`."""
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of domains")
    return [str(d) for d in data]


def load_config(known_domains_file: Optional[str] = None) -> DetectorConfig:
    penalty = _int_env("PAGESCAN_PENALTY", DEFAULT_PENALTY)
    if penalty < 0:
        logger.warning("PAGESCAN_PENALTY must be >= 0, using %d", DEFAULT_PENALTY)
        penalty = DEFAULT_PENALTY

    domains = list(DEFAULT_KNOWN_DOMAINS)
    path = known_domains_file or os.getenv("PAGESCAN_KNOWN_DOMAINS_FILE")
    inline = os.getenv("PAGESCAN_KNOWN_DOMAINS")
    if path:
        domains = load_known_domains(path)
        logger.info("Loaded %d known domains from %s", len(domains), path)
    elif inline:
        domains = [d for d in inline.split(",")]

    return DetectorConfig(known_domains=tuple(domains), penalty=penalty)
