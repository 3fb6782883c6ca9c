"""Tests for the TLS transport builder."""

import ssl
from pathlib import Path

import httpx
import pytest

from runbook.errors import TransportError
from runbook.transport import build_client, load_trust_store


def _system_ca_file():
    paths = ssl.get_default_verify_paths()
    for candidate in (paths.cafile, paths.openssl_cafile):
        if candidate and Path(candidate).is_file():
            return candidate
    return None


SYSTEM_CA_FILE = _system_ca_file()


class TestLoadTrustStore:
    """Tests for trust store construction."""

    def test_verifies_server_certificates(self):
        """Context should require certificates and check hostnames."""
        context = load_trust_store()

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_missing_ca_file(self, tmp_path):
        """An unreadable CA file should fail with TransportError."""
        with pytest.raises(TransportError, match="failed to read CA file"):
            load_trust_store(str(tmp_path / "missing-ca.pem"))

    def test_ca_file_is_directory(self, tmp_path):
        with pytest.raises(TransportError, match="failed to read CA file"):
            load_trust_store(str(tmp_path))

    def test_ca_file_without_certificates(self, tmp_path):
        """A file with no PEM certificates should be rejected."""
        path = tmp_path / "not-a-cert.pem"
        path.write_text("hello\n")

        with pytest.raises(TransportError, match="no usable certificates"):
            load_trust_store(str(path))

    def test_system_trust_store_failure_falls_back(self, monkeypatch):
        """A broken system store should leave an empty, still verifying context."""

        def broken(self, purpose=ssl.Purpose.SERVER_AUTH):
            raise ssl.SSLError("no system store")

        monkeypatch.setattr(ssl.SSLContext, "load_default_certs", broken)

        context = load_trust_store()

        assert context.cert_store_stats()["x509_ca"] == 0
        assert context.verify_mode == ssl.CERT_REQUIRED

    @pytest.mark.skipif(SYSTEM_CA_FILE is None, reason="no system CA bundle file")
    def test_ca_file_certificates_added(self, monkeypatch):
        """Certificates from the CA file should land in the trust store."""
        monkeypatch.setattr(ssl.SSLContext, "load_default_certs", lambda self, purpose=None: None)

        context = load_trust_store(SYSTEM_CA_FILE)

        assert context.cert_store_stats()["x509_ca"] > 0


class TestBuildClient:
    """Tests for HTTP client construction."""

    def test_returns_client_without_deadline(self):
        client = build_client()
        try:
            assert isinstance(client, httpx.Client)
            assert client.timeout.read is None
            assert client.timeout.connect is None
            assert client.headers["User-Agent"].startswith("sensu-runbook/")
        finally:
            client.close()

    def test_unreadable_ca_file(self, tmp_path):
        with pytest.raises(TransportError):
            build_client(str(tmp_path / "missing-ca.pem"))
