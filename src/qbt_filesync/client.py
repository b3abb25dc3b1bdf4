#!/usr/bin/env python3
"""qBittorrent client wrapper exposing the torrent listing used for matching."""

import logging
import time
from typing import Any, List, Optional, Protocol

import qbittorrentapi
import urllib3

from .config import ConnectionConfig
from .constants import DEFAULT_STATUS_FILTER, MAX_RETRY_ATTEMPTS, RETRY_DELAY
from .errors import DaemonQueryFailed, DaemonUnreachable
from .models import TorrentRecord

# Suppress SSL warnings when SSL verification is disabled
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)


class TorrentSource(Protocol):
    """Anything that can list torrents by status."""

    def list_torrents(self, status_filter: str = DEFAULT_STATUS_FILTER) -> List[TorrentRecord]:
        ...


class QBittorrentClient:
    """qBittorrent Web API client wrapper."""

    def __init__(self, config: ConnectionConfig, retry_delay: float = RETRY_DELAY):
        """
        Initialize client wrapper.

        Args:
            config: Connection configuration
            retry_delay: Seconds to wait between connection attempts
        """
        self.config = config
        self.retry_delay = retry_delay
        self._client: Optional[qbittorrentapi.Client] = None

    @property
    def client(self) -> qbittorrentapi.Client:
        """Get the underlying client."""
        if self._client is None:
            raise RuntimeError("Client not connected")
        return self._client

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        """
        Connect and log in to qBittorrent.

        Raises:
            DaemonUnreachable: If every connection attempt failed
        """
        last_error: Optional[Exception] = None
        for attempt in range(MAX_RETRY_ATTEMPTS):
            try:
                client = qbittorrentapi.Client(
                    host=self.config.host,
                    port=self.config.port,
                    username=self.config.username,
                    password=self.config.password,
                    VERIFY_WEBUI_CERTIFICATE=self.config.verify_ssl,
                    REQUESTS_ARGS={'timeout': self.config.timeout}
                )

                # Suppress SSL logging for connection
                original_level = logging.getLogger("urllib3.connectionpool").level
                logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)
                try:
                    client.auth_log_in()
                finally:
                    logging.getLogger("urllib3.connectionpool").setLevel(original_level)

                self._client = client
                ssl_status = "enabled" if self.config.verify_ssl else "disabled"
                logger.info(
                    f"Connected to qBittorrent {client.app.version} "
                    f"(API: {client.app.web_api_version}, SSL: {ssl_status})"
                )
                return

            except qbittorrentapi.LoginFailed as e:
                # Bad credentials are not retried
                raise DaemonUnreachable(f"Login to {self.config.host}:{self.config.port} failed: {e}") from e
            except qbittorrentapi.Forbidden403Error as e:
                raise DaemonUnreachable(f"qBittorrent refused the connection: {e}") from e
            except qbittorrentapi.APIConnectionError as e:
                last_error = e
                if attempt < MAX_RETRY_ATTEMPTS - 1:
                    logger.warning(f"Connection attempt {attempt + 1} failed, retrying: {e}")
                    time.sleep(self.retry_delay)

        raise DaemonUnreachable(
            f"Connection to {self.config.host}:{self.config.port} failed "
            f"after {MAX_RETRY_ATTEMPTS} attempts: {last_error}"
        )

    def disconnect(self) -> None:
        """Disconnect from qBittorrent."""
        if self._client:
            try:
                self._client.auth_log_out()
                logger.debug("Disconnected from qBittorrent")
            except qbittorrentapi.APIError as e:
                logger.debug(f"Logout error (ignored): {e}")
            finally:
                self._client = None

    def list_torrents(self, status_filter: str = DEFAULT_STATUS_FILTER) -> List[TorrentRecord]:
        """
        List torrents matching a status filter.

        Connects first if needed.

        Args:
            status_filter: qBittorrent status filter, e.g. ``completed``

        Returns:
            Torrent records

        Raises:
            DaemonUnreachable: If qBittorrent cannot be reached
            DaemonQueryFailed: If the query is rejected
        """
        if not self.connected:
            self.connect()

        try:
            torrents = self.client.torrents.info(status_filter=status_filter)
        except qbittorrentapi.Forbidden403Error as e:
            raise DaemonQueryFailed(f"Authentication error fetching torrents: {e}") from e
        except qbittorrentapi.HTTPError as e:
            raise DaemonQueryFailed(f"HTTP error fetching torrents: {e}") from e
        except qbittorrentapi.APIConnectionError as e:
            raise DaemonUnreachable(f"API connection error fetching torrents: {e}") from e
        except qbittorrentapi.APIError as e:
            raise DaemonQueryFailed(f"Error fetching torrents: {e}") from e

        records = [self.to_record(t) for t in torrents]
        logger.info(f"Found {len(records)} {status_filter} torrents in qBittorrent")
        return records

    @staticmethod
    def to_record(torrent: Any) -> TorrentRecord:
        """
        Convert a raw torrent into a TorrentRecord.

        Args:
            torrent: qbittorrentapi torrent dictionary

        Returns:
            TorrentRecord; ``content_path`` is empty on qBittorrent versions that do not report it
        """
        return TorrentRecord(
            name=torrent.get("name") or "",
            content_path=torrent.get("content_path") or "",
            save_path=torrent.get("save_path") or None,
            hash=torrent.get("hash") or "",
        )
