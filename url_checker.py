#!/usr/bin/env python3
"""
URL Checker Module for Pocket to Omnivore Importer
Checks whether a bookmarked URL still answers before it is sent to Omnivore.
"""

import errno
import logging
import socket
import threading
import weakref
from typing import Optional

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from models import LivenessResult

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; PocketToOmnivore/1.0)"
DEFAULT_URL_TIMEOUT_MS = 10000

_GAI_ERROR_NAMES = {
    getattr(socket, name): name for name in dir(socket) if name.startswith("EAI_")
}


class SocketTrackingAdapter(HTTPAdapter):
    """
    HTTPAdapter that remembers the sockets its connections open.

    requests only applies timeouts per socket operation, so a server that
    trickles bytes can hold a request open indefinitely. Shutting the
    tracked sockets down is how an expired check aborts its request.
    """

    def __init__(self, *args, **kwargs):
        self.open_sockets = weakref.WeakSet()
        self._lock = threading.Lock()
        super().__init__(*args, **kwargs)

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": self._tracked_pool(HTTPConnectionPool, HTTPConnection),
            "https": self._tracked_pool(HTTPSConnectionPool, HTTPSConnection),
        }

    def _tracked_pool(self, pool_class, connection_class):
        adapter = self

        class TrackedConnection(connection_class):
            def connect(self):
                super().connect()
                adapter.track(self.sock)

        return type(f"Tracked{pool_class.__name__}", (pool_class,), {"ConnectionCls": TrackedConnection})

    def track(self, sock: socket.socket) -> None:
        with self._lock:
            self.open_sockets.add(sock)

    def shutdown_sockets(self) -> None:
        with self._lock:
            sockets = list(self.open_sockets)
            self.open_sockets.clear()

        for sock in sockets:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Already closed
                pass


class UrlChecker:
    """Issues HEAD requests and classifies the outcome as alive or dead."""

    def __init__(self, session: Optional[Session] = None, user_agent: str = USER_AGENT):
        self.session = session or requests.Session()
        self.user_agent = user_agent
        self.adapter = SocketTrackingAdapter()
        self.session.mount("http://", self.adapter)
        self.session.mount("https://", self.adapter)

    def check(self, url: str, timeout_ms: int = DEFAULT_URL_TIMEOUT_MS) -> LivenessResult:
        """
        Check if a URL is still alive and accessible.

        2xx and 3xx responses count as alive; redirects are not followed.
        The whole check is limited to timeout_ms, after which the request is
        aborted and reported as "Timeout".
        Never raises: every failure is reported in the returned result.
        """
        timeout = timeout_ms / 1000.0
        expired = threading.Event()
        deadline = threading.Timer(timeout, self._abort, args=(expired,))
        deadline.daemon = True
        deadline.start()

        try:
            response = self.session.head(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=timeout,
                allow_redirects=False,
            )
            status_code = response.status_code
            response.close()

        except requests.exceptions.Timeout:
            return self._timed_out(url, timeout_ms)

        except requests.exceptions.RequestException as e:
            if expired.is_set():
                return self._timed_out(url, timeout_ms)
            reason = _failure_reason(e)
            logger.debug(f"URL check failed ({reason}): {url}")
            return LivenessResult(is_alive=False, status_code=None, reason=reason)

        except Exception as e:
            if expired.is_set():
                return self._timed_out(url, timeout_ms)
            logger.debug(f"Unexpected error checking {url}: {e}")
            return LivenessResult(is_alive=False, status_code=None, reason=type(e).__name__)

        finally:
            deadline.cancel()

        # An aborted read can still parse as a truncated response
        if expired.is_set():
            return self._timed_out(url, timeout_ms)

        if 200 <= status_code < 400:
            return LivenessResult(is_alive=True, status_code=status_code, reason="OK")

        return LivenessResult(
            is_alive=False, status_code=status_code, reason=f"HTTP {status_code}"
        )

    def _abort(self, expired: threading.Event) -> None:
        expired.set()
        self.adapter.shutdown_sockets()

    def _timed_out(self, url: str, timeout_ms: int) -> LivenessResult:
        logger.debug(f"URL check timed out after {timeout_ms}ms: {url}")
        return LivenessResult(is_alive=False, status_code=None, reason="Timeout")


def _failure_reason(error: BaseException) -> str:
    """
    Find the OS level error code behind a requests failure.

    requests wraps urllib3 errors which wrap the socket error, so walk the
    chain and fall back to the outermost class name.
    """
    seen = set()
    pending = [error]

    while pending:
        current = pending.pop(0)
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, socket.gaierror) and current.errno in _GAI_ERROR_NAMES:
            return _GAI_ERROR_NAMES[current.errno]
        if isinstance(current, OSError) and current.errno in errno.errorcode:
            return errno.errorcode[current.errno]

        pending.append(getattr(current, "reason", None))
        pending.append(current.__cause__)
        pending.append(current.__context__)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))

    return type(error).__name__


_default_checker: Optional[UrlChecker] = None


def check_url_alive(url: str, timeout_ms: int = DEFAULT_URL_TIMEOUT_MS) -> LivenessResult:
    """Check a URL with a shared module-level UrlChecker."""
    global _default_checker
    if _default_checker is None:
        _default_checker = UrlChecker()
    return _default_checker.check(url, timeout_ms)
