# catgallery/errors.py


class GalleryError(Exception):
    """Base class for failures surfaced by the synchronizer.

    The message is what ends up on screen, so keep it human readable.
    """


class ConnectivityError(GalleryError):
    """No network path is available; no request was attempted."""


class RemoteError(GalleryError):
    """Non-2xx response, transport failure or unreadable payload from the cat API."""


class EmptyResultError(GalleryError):
    """A refresh produced no images."""


class StoreError(GalleryError):
    """The local SQLite cache failed to read or write."""
