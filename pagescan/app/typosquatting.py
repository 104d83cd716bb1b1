"""
Compare the page hostname against a list of known-good domains.

Two independent signals per allow-listed domain:
- a small edit distance (1..MAX_TYPO_DISTANCE), e.g. "gmai1.com" vs "gmail.com"
- the official domain embedded in a longer host, e.g. "gmail.com.evil.net"
"""

from typing import Iterable, List

from pagescan.models import SimilarityCandidate, Verdict
from .string_metrics import levenshtein

MAX_TYPO_DISTANCE = 2
SUBSTRING_NOTE = "contains official domain as substring"


def normalize_domains(domains: Iterable[str]) -> List[str]:
	"""Lower-case and strip the allow-list, dropping blanks."""
	out = []
	for d in domains or ():
		d = str(d).strip().lower()
		if d:
			out.append(d)
	return out


def find_candidates(host: str, known_domains: Iterable[str]) -> List[SimilarityCandidate]:
	plain = (host or "").strip().lower()
	candidates: List[SimilarityCandidate] = []
	for kd in normalize_domains(known_domains):
		dist = levenshtein(plain, kd)
		if 0 < dist <= MAX_TYPO_DISTANCE:
			candidates.append(SimilarityCandidate(domain=kd, distance=dist))
		if kd in plain and plain != kd:
			candidates.append(SimilarityCandidate(domain=kd, distance=0, note=SUBSTRING_NOTE))
	return candidates


def detect_typosquatting(host: str, known_domains: Iterable[str]) -> Verdict:
	candidates = find_candidates(host, known_domains)
	if candidates:
		return Verdict(
			key="typosquatting",
			value=tuple(candidates),
			suspicious=True,
			detail="Possible typosquatting or look-alike domain detected; see similar candidates.",
		)
	return Verdict(
		key="typosquatting",
		value=None,
		suspicious=False,
		detail="No obvious typosquatting against the base verification list.",
	)
