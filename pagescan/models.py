# models.py
"""
Value types shared by the detector checks and the report.

Everything here is immutable and built fresh on each detection run.
`to_dict()` gives the JSON-friendly shape read by the explanation view.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

import idna

REPORT_NOTE = (
    "Report generated locally for educational purposes. "
    "No sensitive data was transmitted to any server."
)

ISSUE_ORDER = ("protocol", "hostname", "typosquatting", "forms", "links", "assets")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat().replace("+00:00", "Z")


def ascii_hostname(host: Optional[str]) -> str:
    """
    Lower-cased host in the ASCII form a browser reports (IDNs as xn-- punycode).
    Hosts IDNA rejects are returned lower-cased but otherwise unchanged.
    """
    host = (host or "").lower()
    if host.isascii():
        return host
    try:
        return idna.encode(host, uts46=True).decode("ascii")
    except (idna.IDNAError, UnicodeError):
        return host


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class SimilarityCandidate:
    domain: str
    distance: int
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"domain": self.domain, "distance": self.distance}
        if self.note:
            out["note"] = self.note
        return out


@dataclass(frozen=True)
class FormFinding:
    index: int
    action: Optional[str]
    method: str
    input_types: Tuple[str, ...]
    suspicious: bool
    detail: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "action": self.action,
            "method": self.method,
            "inputTypes": list(self.input_types),
            "suspicious": self.suspicious,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class LinkFinding:
    href: str
    reason: str
    suspicious: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"href": self.href, "suspicious": self.suspicious, "reason": self.reason}


@dataclass(frozen=True)
class LinkSummary:
    total: int
    flagged: Tuple[LinkFinding, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "flagged": _serialize(self.flagged)}


@dataclass(frozen=True)
class AssetSummary:
    images_total: int
    external: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"imagesTotal": self.images_total, "external": list(self.external)}


VerdictValue = Union[str, Tuple[Any, ...], LinkSummary, AssetSummary, None]


@dataclass(frozen=True)
class Verdict:
    """Outcome of one heuristic check."""

    key: str
    value: VerdictValue
    suspicious: bool
    detail: str

    def __post_init__(self):
        if not self.detail:
            raise ValueError(f"verdict {self.key!r} needs a non-empty detail")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "value": _serialize(self.value),
            "suspicious": self.suspicious,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class Report:
    timestamp: str
    url: str
    score: int
    issues: Tuple[Verdict, ...]
    note: str = REPORT_NOTE

    @property
    def suspicious_count(self) -> int:
        return sum(1 for v in self.issues if v.suspicious)

    def issue(self, key: str) -> Verdict:
        for v in self.issues:
            if v.key == key:
                return v
        raise KeyError(key)

    def summary(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "url": self.url, "score": self.score}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "url": self.url,
            "score": self.score,
            "issues": _serialize(self.issues),
            "note": self.note,
        }


@dataclass(frozen=True)
class FormDescriptor:
    """Raw attributes of one <form>, as found in the page."""

    action: Optional[str] = None
    method: Optional[str] = None
    input_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PageSnapshot:
    """Everything the checks are allowed to look at for a single page."""

    url: str
    scheme: str
    hostname: str
    forms: Tuple[FormDescriptor, ...] = ()
    links: Tuple[str, ...] = ()
    images: Tuple[str, ...] = ()

    @classmethod
    def from_url(cls, url: str, forms=(), links=(), images=()) -> "PageSnapshot":
        parsed = urlsplit(url)
        scheme = f"{parsed.scheme.lower()}:" if parsed.scheme else ""
        # netloc minus credentials and port; keeps IPv6 brackets like location.hostname
        host = parsed.netloc.rsplit("@", 1)[-1]
        if host.startswith("["):
            host = host[: host.find("]") + 1]
        else:
            host = host.split(":", 1)[0]
        return cls(
            url=url,
            scheme=scheme,
            hostname=ascii_hostname(host),
            forms=tuple(forms),
            links=tuple(links),
            images=tuple(images),
        )


@dataclass(frozen=True)
class DetectionFailure:
    timestamp: str
    url: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "url": self.url, "error": self.error}


@dataclass(frozen=True)
class DetectionOutcome:
    """Either a finished Report or the reason detection failed."""

    report: Optional[Report] = None
    failure: Optional[DetectionFailure] = None

    def __post_init__(self):
        if (self.report is None) == (self.failure is None):
            raise ValueError("outcome needs exactly one of report or failure")

    @classmethod
    def failed(cls, url: str, error: BaseException) -> "DetectionOutcome":
        return cls(failure=DetectionFailure(utc_timestamp(), url, str(error) or type(error).__name__))

    @property
    def ok(self) -> bool:
        return self.report is not None

    def to_record(self) -> Dict[str, Any]:
        if self.report is not None:
            return self.report.to_dict()
        return self.failure.to_dict()

    def summary(self) -> Optional[Dict[str, Any]]:
        return self.report.summary() if self.report is not None else None


__all__ = [
    "REPORT_NOTE",
    "ISSUE_ORDER",
    "utc_timestamp",
    "ascii_hostname",
    "SimilarityCandidate",
    "FormFinding",
    "LinkFinding",
    "LinkSummary",
    "AssetSummary",
    "Verdict",
    "Report",
    "FormDescriptor",
    "PageSnapshot",
    "DetectionFailure",
    "DetectionOutcome",
]
