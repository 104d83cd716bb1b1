from pagescan.app.typosquatting import SUBSTRING_NOTE, detect_typosquatting, find_candidates
from pagescan.config import DEFAULT_KNOWN_DOMAINS


def test_near_miss_candidate():
    v = detect_typosquatting("gmai1.com", DEFAULT_KNOWN_DOMAINS)
    assert v.key == "typosquatting"
    assert v.suspicious
    gmail = [c for c in v.value if c.domain == "gmail.com"]
    assert len(gmail) == 1
    assert 0 < gmail[0].distance <= 2
    assert gmail[0].note is None


def test_substring_candidate():
    v = detect_typosquatting("secure.gmail.com.evil.net", DEFAULT_KNOWN_DOMAINS)
    assert v.suspicious
    hits = [c for c in v.value if c.domain == "gmail.com"]
    assert hits[0].distance == 0
    assert hits[0].note == SUBSTRING_NOTE


def test_exact_match_is_clean():
    v = detect_typosquatting("gmail.com", DEFAULT_KNOWN_DOMAINS)
    assert not v.suspicious
    assert v.value is None
    assert v.detail


def test_both_rules_can_fire_for_same_entry():
    # "gmail.com." is one edit away and also embeds gmail.com
    found = find_candidates("gmail.com.", ["gmail.com"])
    assert [(c.distance, c.note) for c in found] == [(1, None), (0, SUBSTRING_NOTE)]


def test_multiple_allow_list_entries():
    found = find_candidates("senai.com.br", ["senai.br", "senai.com.br"])
    # senai.com.br vs senai.br is 4 edits, no substring; exact match for the other
    assert found == []
    found = find_candidates("google.com.senai.br.x", ["google.com", "senai.br"])
    assert {c.domain for c in found} == {"google.com", "senai.br"}


def test_case_insensitive_on_both_sides():
    v = detect_typosquatting("GMAI1.COM", ["Gmail.Com"])
    assert v.suspicious
    assert v.value[0].domain == "gmail.com"


def test_empty_allow_list():
    assert not detect_typosquatting("gmai1.com", []).suspicious
