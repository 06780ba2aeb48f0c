# catgallery/connectivity.py
import socket

import httpx


class ConnectivityHelper:
    """Answers "is a network path to the API currently available"."""

    def __init__(self, host: str, port: int = 443, timeout: float = 1.5, force_offline: bool = False):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.force_offline = force_offline

    @classmethod
    def for_base_url(cls, base_url: str, **kwargs) -> "ConnectivityHelper":
        url = httpx.URL(base_url)
        port = url.port or (443 if url.scheme == "https" else 80)
        return cls(url.host, port, **kwargs)

    def is_connected(self) -> bool:
        if self.force_offline:
            return False
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False
