import itertools

import pytest
from pagescan.app.string_metrics import levenshtein


@pytest.mark.parametrize("a,b,expected", [
    ("", "", 0),
    ("", "abc", 3),
    ("kitten", "sitting", 3),
    ("gmail.com", "gmai1.com", 1),
    ("gmail.com", "gmial.com", 2),
    ("Gmail.com", "gmail.com", 1),
])
def test_levenshtein_known_values(a, b, expected):
    assert levenshtein(a, b) == expected


WORDS = ["", "a", "gmail.com", "gmai1.com", "google.com", "outlook.com", "senai.br"]


def test_levenshtein_symmetric_and_identity():
    for a, b in itertools.product(WORDS, repeat=2):
        assert levenshtein(a, b) == levenshtein(b, a)
    for w in WORDS:
        assert levenshtein(w, w) == 0


def test_levenshtein_triangle_inequality():
    for a, b, c in itertools.product(WORDS, repeat=3):
        assert levenshtein(a, c) <= levenshtein(a, b) + levenshtein(b, c)
