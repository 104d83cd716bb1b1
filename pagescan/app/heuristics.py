"""
heuristics.py

Explainable checks over the page's own URL: the scheme and the hostname.

Public functions:
	detect_protocol(scheme: str) -> Verdict
	classify_hostname(host: str) -> Verdict

Example:
	>>> from pagescan.app.heuristics import classify_hostname
	>>> classify_hostname("192.168.1.10").suspicious
	True
"""

import re

from pagescan.models import Verdict

# Configuration: thresholds (tweakable)
SECURE_SCHEME = "https:"
MAX_HOST_LENGTH = 40
SUSPICIOUS_LABEL_COUNT = 4  # >= 4 labels => suspicious

IPV4_RE = re.compile(r'^(25[0-5]|2[0-4]\d|[01]?\d?\d)(\.(25[0-5]|2[0-4]\d|[01]?\d?\d)){3}$')
# Loose on purpose: any colon-bearing string of hex digits and colons passes,
# so some non-addresses (e.g. "abc:def") are reported as IPv6.
IPV6_LOOSE_RE = re.compile(r'^[0-9a-f:]+$', re.IGNORECASE)
PUNYCODE_PREFIX = "xn--"


def _normalize_scheme(scheme: str) -> str:
	scheme = (scheme or "").strip().lower()
	if scheme and not scheme.endswith(":"):
		scheme += ":"
	return scheme


def is_ip_address(host: str) -> bool:
	"""Return True if host looks like an IPv4 or (loosely) IPv6 address."""
	if IPV4_RE.match(host):
		return True
	if ":" in host and IPV6_LOOSE_RE.match(host.replace("[", "").replace("]", "")):
		return True
	return False


def _label_count(host: str) -> int:
	return len([p for p in host.split(".") if p])


def detect_protocol(scheme: str) -> Verdict:
	scheme = _normalize_scheme(scheme)
	if scheme == SECURE_SCHEME:
		return Verdict(
			key="protocol",
			value=scheme,
			suspicious=False,
			detail="Connection over HTTPS (encrypted), but still check the certificate.",
		)
	return Verdict(
		key="protocol",
		value=scheme,
		suspicious=True,
		detail="HTTP detected: traffic is not encrypted (risk signal).",
	)


def classify_hostname(host: str) -> Verdict:
	"""
	Run the hostname rules and merge them into one verdict.

	Every rule is evaluated; the reasons of those that fire are joined with
	a space in evaluation order:
	  1) IP address instead of a name
	  2) punycode (xn--) prefix
	  3) >= 4 labels
	  4) more than 40 characters
	"""
	host = host or ""
	reasons = []

	# 1) IP-based host
	if is_ip_address(host):
		reasons.append("IP address used as hostname (official sites rarely use IPs for login).")

	# 2) Punycode
	if host.startswith(PUNYCODE_PREFIX):
		reasons.append("Punycode detected (xn--): possible homograph attack with unicode characters.")

	# 3) Subdomain depth
	if _label_count(host) >= SUSPICIOUS_LABEL_COUNT:
		reasons.append("Too many subdomains (e.g. a.b.c.example.com): may be an attempt to disguise the site.")

	# 4) Length
	if len(host) > MAX_HOST_LENGTH:
		reasons.append(f"Hostname is very long (> {MAX_HOST_LENGTH} characters): sometimes used to confuse users.")

	return Verdict(
		key="hostname",
		value=host,
		suspicious=bool(reasons),
		detail=" ".join(reasons) if reasons else "Hostname looks syntactically normal.",
	)


# Simple CLI / quick tests
if __name__ == "__main__":
	test_hosts = [
		"example.com",  # normal
		"192.168.1.1",  # ip
		"xn--80ak6aa92e.com",  # punycode
		"a.b.c.example.com",  # depth
		"very-long-hostname-" + "a" * 30 + ".com",  # length
	]

	for h in test_hosts:
		v = classify_hostname(h)
		print("=" * 80)
		print("Host:", h)
		print("Suspicious:", v.suspicious, "->", v.detail)
