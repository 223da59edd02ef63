"""Tests for TLS key material lookup."""

from pathlib import Path

import pytest

from shocker_hub.adapters.tls import FileCertificateProvider
from shocker_hub.domain.errors import ConfigurationError


def _touch(directory: Path, *names: str) -> None:
    for name in names:
        (directory / name).write_text("pem", encoding="utf-8")


def test_when_domain_files_exist_then_they_win(tmp_path: Path) -> None:
    """Given domain and fallback pairs, when looking up, then the domain pair is returned."""
    _touch(tmp_path, "hub.example-key.pem", "hub.example-cert.pem")
    _touch(tmp_path, "private-key.pem", "certificate.pem")

    pair = FileCertificateProvider(tmp_path).get_key_pair("hub.example")

    assert pair.key_path == tmp_path / "hub.example-key.pem"
    assert pair.cert_path == tmp_path / "hub.example-cert.pem"


def test_when_only_fallback_exists_then_fallback_used(tmp_path: Path) -> None:
    """Given only the self-signed pair, when looking up, then it is returned."""
    _touch(tmp_path, "private-key.pem", "certificate.pem")

    pair = FileCertificateProvider(tmp_path).get_key_pair("hub.example")

    assert pair.cert_path == tmp_path / "certificate.pem"


def test_when_domain_pair_incomplete_then_fallback_used(tmp_path: Path) -> None:
    """Given a domain key without its certificate, when looking up, then the fallback is used."""
    _touch(tmp_path, "hub.example-key.pem", "private-key.pem", "certificate.pem")

    pair = FileCertificateProvider(tmp_path).get_key_pair("hub.example")

    assert pair.key_path == tmp_path / "private-key.pem"


def test_when_nothing_exists_then_configuration_error(tmp_path: Path) -> None:
    """Given an empty certificate directory, when looking up, then ConfigurationError."""
    with pytest.raises(ConfigurationError, match="No TLS certificate available"):
        FileCertificateProvider(tmp_path).get_key_pair("hub.example")
