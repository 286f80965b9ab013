"""Rewriting Dropbox share links into direct-download URLs."""

from urllib.parse import urlsplit, urlunsplit

from dircast.feeds.models import ShareLink
from dircast.utils.errors import NormalizationError, NormalizationFailure

SHARE_HOSTS = {"www.dropbox.com", "dropbox.com"}
DIRECT_HOST = "dl.dropboxusercontent.com"
PREVIEW_FLAG = "dl=0"
DOWNLOAD_FLAG = "dl=1"


def _shape_error(link: str, message: str) -> NormalizationError:
    return NormalizationError(NormalizationFailure.UNEXPECTED_LINK_SHAPE, link, message)


def to_direct_download(share_link: ShareLink | str) -> str:
    """Turn a share link into a URL that serves the file bytes.

    ``https://www.dropbox.com/s/abc/ep1.mp3?dl=0`` becomes
    ``https://dl.dropboxusercontent.com/s/abc/ep1.mp3?dl=1``. A link already
    on the direct host with ``dl=1`` is returned unchanged.

    Raises:
        NormalizationError: If the link is not an https Dropbox link with
            exactly one ``dl`` flag
    """
    link = share_link.canonical_url if isinstance(share_link, ShareLink) else share_link
    parts = urlsplit(link)

    if parts.scheme != "https":
        raise _shape_error(link, "Share link is not https")
    if parts.netloc not in SHARE_HOSTS | {DIRECT_HOST}:
        raise _shape_error(link, "Share link is not on a Dropbox host")
    if not parts.path.strip("/"):
        raise _shape_error(link, "Share link has no path")

    params = parts.query.split("&") if parts.query else []
    flags = [p for p in params if p.split("=", 1)[0] == "dl"]
    if len(flags) != 1 or flags[0] not in (PREVIEW_FLAG, DOWNLOAD_FLAG):
        raise _shape_error(link, "Share link has no single dl=0/dl=1 flag")

    if parts.netloc == DIRECT_HOST:
        if flags[0] != DOWNLOAD_FLAG:
            raise _shape_error(link, "Direct link is not a download link")
        return link

    query = "&".join(DOWNLOAD_FLAG if p == flags[0] else p for p in params)
    return urlunsplit((parts.scheme, DIRECT_HOST, parts.path, query, parts.fragment))
