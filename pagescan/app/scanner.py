"""
scanner.py
Main orchestration of the page detection pipeline.
"""

import logging
from datetime import datetime
from typing import Optional

from pagescan.config import DetectorConfig
from pagescan.html_scanner import analyze_assets, analyze_forms, analyze_links
from pagescan.models import DetectionOutcome, PageSnapshot, Report, utc_timestamp
from .heuristics import classify_hostname, detect_protocol
from .typosquatting import detect_typosquatting

logger = logging.getLogger("scanner")

MAX_SCORE = 100


class ReportAggregator:
	"""Runs every check over one snapshot and scores the result."""

	def __init__(self, config: Optional[DetectorConfig] = None):
		self.config = config or DetectorConfig()

	def score(self, issues) -> int:
		suspicious = sum(1 for v in issues if v.suspicious)
		return max(0, MAX_SCORE - self.config.penalty * suspicious)

	def build_report(self, snapshot: PageSnapshot, now: Optional[datetime] = None) -> Report:
		# 1. URL checks
		proto = detect_protocol(snapshot.scheme)
		host = classify_hostname(snapshot.hostname)
		typo = detect_typosquatting(host.value.lower(), self.config.known_domains)

		# 2. page structure
		forms = analyze_forms(snapshot)
		links = analyze_links(snapshot)
		assets = analyze_assets(snapshot)

		issues = (proto, host, typo, forms, links, assets)
		report = Report(
			timestamp=utc_timestamp(now),
			url=snapshot.url,
			score=self.score(issues),
			issues=issues,
		)
		logger.debug("Report for %s: score=%d suspicious=%d", snapshot.url, report.score, report.suspicious_count)
		return report

	def run(self, snapshot: PageSnapshot) -> DetectionOutcome:
		"""Like build_report, but a failure becomes a DetectionFailure instead of raising."""
		try:
			return DetectionOutcome(report=self.build_report(snapshot))
		except Exception as e:
			logger.exception("Detection failed for %s: %s", snapshot.url, e)
			return DetectionOutcome.failed(snapshot.url, e)


def build_report(snapshot: PageSnapshot, config: Optional[DetectorConfig] = None) -> Report:
	return ReportAggregator(config).build_report(snapshot)


# CLI testing
if __name__ == "__main__":
	test_urls = [
		"http://192.0.2.10/login",
		"https://example.com",
		"https://secure.gmail.com.evil.net/",
	]
	for u in test_urls:
		print("=" * 80)
		r = build_report(PageSnapshot.from_url(u))
		print(u, "score:", r.score)
		for v in r.issues:
			print(f"- {v.key}: {'suspicious' if v.suspicious else 'ok'} -> {v.detail}")
