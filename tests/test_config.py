import json

import pytest
from pagescan.config import DEFAULT_KNOWN_DOMAINS, DEFAULT_PENALTY, DetectorConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PAGESCAN_PENALTY", "PAGESCAN_KNOWN_DOMAINS", "PAGESCAN_KNOWN_DOMAINS_FILE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = load_config()
    assert cfg.penalty == DEFAULT_PENALTY == 15
    assert cfg.known_domains == DEFAULT_KNOWN_DOMAINS
    assert "gmail.com" in cfg.known_domains


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PAGESCAN_PENALTY", "20")
    monkeypatch.setenv("PAGESCAN_KNOWN_DOMAINS", " Bank.example , ,mail.example")
    cfg = load_config()
    assert cfg.penalty == 20
    assert cfg.known_domains == ("bank.example", "mail.example")


def test_invalid_penalty_falls_back(monkeypatch):
    monkeypatch.setenv("PAGESCAN_PENALTY", "lots")
    assert load_config().penalty == DEFAULT_PENALTY
    monkeypatch.setenv("PAGESCAN_PENALTY", "-5")
    assert load_config().penalty == DEFAULT_PENALTY


def test_domains_file(tmp_path):
    path = tmp_path / "domains.json"
    path.write_text(json.dumps(["Portal.Gov.Example", "bank.example"]), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.known_domains == ("portal.gov.example", "bank.example")


def test_domains_file_must_be_list(tmp_path):
    path = tmp_path / "domains.json"
    path.write_text('{"gmail.com": true}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_negative_penalty_rejected():
    with pytest.raises(ValueError):
        DetectorConfig(penalty=-1)
