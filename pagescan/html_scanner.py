# html_scanner.py
"""
HTML scanner: turn already-loaded page HTML into a PageSnapshot and look for
risky forms, links and externally hosted images.

Nothing here touches the network: hrefs and sources are only parsed as text.

Primary functions:
    snapshot_from_html(html: str, url: str) -> PageSnapshot
    analyze_forms(snapshot) -> Verdict
    analyze_links(snapshot) -> Verdict
    analyze_assets(snapshot) -> Verdict
"""

import logging
import re
from typing import List, Optional
from urllib.parse import SplitResult, urljoin, urlsplit

from bs4 import BeautifulSoup

from pagescan.models import (
    AssetSummary,
    FormDescriptor,
    FormFinding,
    LinkFinding,
    LinkSummary,
    PageSnapshot,
    Verdict,
    ascii_hostname,
)

logger = logging.getLogger("html_scanner")

SECURE_SCHEME = "https"

# government ids, card numbers, banking passwords, PIN (English and Portuguese)
SENSITIVE_INPUT_RE = re.compile(
    r"cpf|ssn|social.?security|cartao|cartão|credit|card.?number|numero do cartao"
    r"|senha.?banc|password.?banc|bank.?password|senha.?[uú]nica|pin"
)
SHORTENER_RE = re.compile(
    r"(?<![\w-])(?:tinyurl\.com|bit\.ly|goo\.gl|t\.co|tiny\.cc|ow\.ly|is\.gd)(?=[/:?#&%=.]|$)",
    re.IGNORECASE,
)
PERCENT_ENCODED_RE = re.compile(r"%[0-9A-Fa-f]{2}")
OBFUSCATED_MIN_LENGTH = 100
IP_LINK_RE = re.compile(r"https?://\d+\.\d+\.\d+\.\d+", re.IGNORECASE)
PUNYCODE_MARKER = "xn--"


def _bare_host(host: Optional[str]) -> str:
    return ascii_hostname((host or "").strip("[]"))


def resolve_url(raw: str, base_url: str) -> Optional[SplitResult]:
    """
    Resolve `raw` against the page URL.
    Returns None when it cannot be parsed or stays relative (no usable base).
    """
    try:
        resolved = urlsplit(urljoin(base_url, raw))
    except ValueError as e:
        logger.debug("cannot resolve %r against %r: %s", raw, base_url, e)
        return None
    if not resolved.scheme:
        logger.debug("%r is still relative after resolving against %r", raw, base_url)
        return None
    return resolved


def _input_type(tag) -> str:
    declared = (tag.get("type") or "").strip().lower()
    if declared:
        return declared
    if tag.name == "input":
        return "text"
    if tag.name == "button":
        return "submit"
    return tag.name.lower()


def snapshot_from_html(html: str, url: str) -> PageSnapshot:
    """Parse page HTML with BeautifulSoup into the snapshot the checks read."""
    soup = BeautifulSoup(html or "", "html.parser")

    forms = []
    for form in soup.find_all("form"):
        fields = form.find_all(["input", "button", "textarea"])
        forms.append(FormDescriptor(
            action=form.get("action"),
            method=form.get("method"),
            input_types=tuple(_input_type(f) for f in fields),
        ))

    links = [a.get("href") for a in soup.find_all("a", href=True)]
    images = [img.get("src") or "" for img in soup.find_all("img")]

    return PageSnapshot.from_url(url, forms=forms, links=links, images=images)


def _analyze_form(index: int, form: FormDescriptor, snapshot: PageSnapshot) -> FormFinding:
    action = form.action
    method = (form.method or "GET").strip().upper() or "GET"
    page_host = _bare_host(snapshot.hostname)
    suspicious = False
    reasons: List[str] = []

    if not action:
        suspicious = True
        reasons.append('Form has no "action" attribute: real pages usually point it at an endpoint.')
    else:
        resolved = resolve_url(action, snapshot.url)
        if resolved is None:
            reasons.append("Form action invalid/relative (verify).")
        else:
            action_host = _bare_host(resolved.hostname)
            if action_host != page_host:
                suspicious = True
                reasons.append(f"Form submits to external host: {action_host or '(none)'}")
            if resolved.scheme and resolved.scheme.lower() != SECURE_SCHEME:
                suspicious = True
                reasons.append(f"Form action uses a non-HTTPS protocol ({resolved.scheme.lower()}:)")

    names = " ".join(form.input_types).lower()
    if SENSITIVE_INPUT_RE.search(names):
        suspicious = True
        reasons.append("Sensitive inputs detected (government ID/card/banking password): "
                       "an ordinary login should not ask for these.")

    return FormFinding(
        index=index,
        action=action or None,
        method=method,
        input_types=tuple(form.input_types),
        suspicious=suspicious,
        detail=" ".join(reasons) if reasons else "Form looks normal (basic heuristic).",
    )


def analyze_forms(snapshot: PageSnapshot) -> Verdict:
    results = [_analyze_form(idx, f, snapshot) for idx, f in enumerate(snapshot.forms)]
    return Verdict(
        key="forms",
        value=tuple(results),
        suspicious=any(r.suspicious for r in results),
        detail=f"Analyzed {len(results)} form(s) on the page.",
    )


def _link_findings(href: str) -> List[LinkFinding]:
    found: List[LinkFinding] = []
    is_data = href.lower().startswith("data:")
    obfuscated = bool(SHORTENER_RE.search(href)) or (
        bool(PERCENT_ENCODED_RE.search(href)) and len(href) > OBFUSCATED_MIN_LENGTH
    )
    if is_data:
        found.append(LinkFinding(href=href, reason="Link with embedded data URI: suspicious."))
    elif obfuscated:
        found.append(LinkFinding(href=href, reason="Shortener or heavily obfuscated link."))

    if PUNYCODE_MARKER in href.lower():
        found.append(LinkFinding(href=href, reason="Punycode detected."))

    if IP_LINK_RE.search(href):
        found.append(LinkFinding(href=href, reason="Link to IP address."))
    return found


def analyze_links(snapshot: PageSnapshot) -> Verdict:
    flagged: List[LinkFinding] = []
    for raw in snapshot.links:
        # text only, links are never followed
        flagged.extend(_link_findings((raw or "").strip()))

    total = len(snapshot.links)
    return Verdict(
        key="links",
        value=LinkSummary(total=total, flagged=tuple(flagged)),
        suspicious=bool(flagged),
        detail=f"{total} link(s) found; {len(flagged)} flagged as potentially suspicious.",
    )


def analyze_assets(snapshot: PageSnapshot) -> Verdict:
    page_host = _bare_host(snapshot.hostname)
    external = []
    for src in snapshot.images:
        resolved = resolve_url(src, snapshot.url)
        if resolved is None:
            continue
        if _bare_host(resolved.hostname) != page_host:
            external.append(resolved.geturl())

    return Verdict(
        key="assets",
        value=AssetSummary(images_total=len(snapshot.images), external=tuple(external)),
        suspicious=bool(external),
        detail=(f"External images/resources detected ({len(external)})."
                if external else "No external images detected."),
    )


# quick CLI test
if __name__ == "__main__":
    sample = '''
    <html><body>
    <form method="post"><input type="text" name="user"><input type="password-bancaria"></form>
    <a href="https://bit.ly/xyz">promo</a>
    <img src="/logo.png">
    </body></html>
    '''
    snap = snapshot_from_html(sample, "http://192.0.2.10/login")
    for check in (analyze_forms, analyze_links, analyze_assets):
        v = check(snap)
        print("-" * 80)
        print(v.key, v.suspicious, v.detail)
