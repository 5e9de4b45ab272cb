"""Serving certificate sources for the webhook TLS listener."""

import os
import ssl
import threading
from typing import Optional, Protocol, Tuple

from storageaccessor.core.exceptions import CertificateError
from storageaccessor.core.logging import get_logger

logger = get_logger(__name__)


class CertificateSource(Protocol):
    """Yields the certificate to serve for the next TLS handshake."""

    def current_context(self) -> ssl.SSLContext: ...


def _new_server_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


class FileCertificateSource:
    """
    PEM certificate/key pair on disk, reloaded when either file changes.

    Rotation is detected by modification time on each call, so a pair
    replaced by cert-manager or a mounted secret update is picked up by
    the next handshake without restarting the server.
    """

    def __init__(self, cert_file: str, key_file: str):
        self.cert_file = cert_file
        self.key_file = key_file
        self._lock = threading.Lock()
        self._context: Optional[ssl.SSLContext] = None
        self._stamp: Optional[Tuple[float, float]] = None

    def _file_stamp(self) -> Tuple[float, float]:
        try:
            return (
                os.stat(self.cert_file).st_mtime,
                os.stat(self.key_file).st_mtime,
            )
        except OSError as e:
            raise CertificateError(f"Cannot stat certificate pair: {e}") from e

    def _load(self) -> ssl.SSLContext:
        context = _new_server_context()
        try:
            context.load_cert_chain(self.cert_file, self.key_file)
        except (OSError, ssl.SSLError) as e:
            raise CertificateError(
                f"Failed to load certificate {self.cert_file}: {e}"
            ) from e
        return context

    def current_context(self) -> ssl.SSLContext:
        with self._lock:
            stamp = self._file_stamp()
            if self._context is None or stamp != self._stamp:
                self._context = self._load()
                if self._stamp is not None:
                    logger.info(f"Reloaded serving certificate {self.cert_file}")
                self._stamp = stamp
            return self._context


def build_server_ssl_context(source: CertificateSource) -> ssl.SSLContext:
    """Server context that takes its certificate from source per handshake."""
    base = _new_server_context()

    def _select_certificate(ssl_object, server_name, _context):
        try:
            ssl_object.context = source.current_context()
        except CertificateError as e:
            logger.error(f"TLS handshake without certificate: {e}")
            return ssl.ALERT_DESCRIPTION_INTERNAL_ERROR
        return None

    base.sni_callback = _select_certificate
    return base
