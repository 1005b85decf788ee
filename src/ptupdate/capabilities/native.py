"""Capabilities implemented in-process with httpx, zipfile and shutil.

Failures are reported with the same numeric codes the equivalent system
tools would use, so diagnostics read the same for both backends.
"""

import logging
import os
import shutil
import time
import zipfile
from pathlib import Path
from typing import Final

import httpx

from ptupdate import __version__
from ptupdate.capabilities.interface import (
    ArchiveExtractor,
    CommandResult,
    HeaderResponse,
    HttpClient,
    TreeCopier,
)

logger = logging.getLogger(__name__)

USER_AGENT: Final = f"ptupdate/{__version__}"

# curl exit codes
CURL_URL_MALFORMAT: Final = 3
CURL_COULDNT_CONNECT: Final = 7
CURL_HTTP_ERROR: Final = 22
CURL_WRITE_ERROR: Final = 23
CURL_TIMEOUT: Final = 28

# unzip exit codes
UNZIP_BAD_ARCHIVE: Final = 3
UNZIP_NO_MATCH: Final = 11


def _oserror_code(e: OSError) -> int:
    return e.errno or 1


def _httpx_error_code(e: httpx.HTTPError | httpx.InvalidURL) -> int:
    if isinstance(e, httpx.InvalidURL):
        return CURL_URL_MALFORMAT
    if isinstance(e, httpx.TimeoutException):
        return CURL_TIMEOUT
    if isinstance(e, httpx.ConnectError):
        return CURL_COULDNT_CONNECT
    if isinstance(e, httpx.HTTPStatusError):
        return CURL_HTTP_ERROR
    return 1


class HttpxClient(HttpClient):
    """HTTP client using httpx."""

    def __init__(self, timeout: float = 30.0, transport: httpx.BaseTransport | None = None):
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "httpx"

    def is_available(self) -> bool:
        return True

    def _client(self, follow_redirects: bool) -> httpx.Client:
        return httpx.Client(
            follow_redirects=follow_redirects,
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    def fetch_headers(self, url: str) -> HeaderResponse:
        logger.debug("HEAD %s", url)
        try:
            with self._client(follow_redirects=False) as client:
                response = client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return HeaderResponse(_httpx_error_code(e), error=str(e))

        if response.status_code >= 400:
            return HeaderResponse(CURL_HTTP_ERROR, error=f"HTTP {response.status_code}")
        headers = {k.lower(): v for k, v in response.headers.items()}
        return HeaderResponse(0, headers=headers)

    def download(self, url: str, dest: Path) -> CommandResult:
        logger.debug("GET %s -> %s", url, dest)
        try:
            with self._client(follow_redirects=True) as client, client.stream("GET", url) as response:
                response.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return CommandResult(_httpx_error_code(e), stderr=str(e))
        except OSError as e:
            logger.debug("Failed to write %s: %s", dest, e)
            return CommandResult(CURL_WRITE_ERROR, stderr=str(e))
        return CommandResult(0)


class ZipfileExtractor(ArchiveExtractor):
    """Archive extractor using the zipfile module."""

    @property
    def name(self) -> str:
        return "zipfile"

    def is_available(self) -> bool:
        return True

    def extract(self, archive: Path, member_prefix: str, dest: Path) -> CommandResult:
        prefix = member_prefix.rstrip("/") + "/"
        try:
            with zipfile.ZipFile(archive) as zf:
                members = [m for m in zf.infolist() if m.filename.startswith(prefix)]
                if not members:
                    return CommandResult(UNZIP_NO_MATCH, stderr=f"caution: filename not matched: {prefix}*")
                for member in members:
                    target = Path(zf.extract(member, dest))
                    if member.is_dir():
                        continue
                    # Keep the mode bits and timestamp stored in the archive, like unzip
                    mode = (member.external_attr >> 16) & 0o777
                    if mode:
                        target.chmod(mode)
                    stamp = time.mktime(member.date_time + (0, 0, -1))
                    os.utime(target, (stamp, stamp))
        except zipfile.BadZipFile as e:
            return CommandResult(UNZIP_BAD_ARCHIVE, stderr=str(e))
        except OSError as e:
            return CommandResult(_oserror_code(e), stderr=str(e))
        return CommandResult(0)


class ShutilCopier(TreeCopier):
    """Tree copier using shutil, skipping files whose destination is newer."""

    @property
    def name(self) -> str:
        return "shutil"

    def is_available(self) -> bool:
        return True

    def merge_copy(self, source: Path, dest: Path) -> CommandResult:
        if not source.is_dir():
            return CommandResult(1, stderr=f"cannot stat '{source}': No such directory")
        try:
            for root, _dirs, files in os.walk(source):
                target_dir = dest / Path(root).relative_to(source)
                target_dir.mkdir(parents=True, exist_ok=True)
                for filename in files:
                    src_file = Path(root) / filename
                    dst_file = target_dir / filename
                    if dst_file.exists() and dst_file.stat().st_mtime >= src_file.stat().st_mtime:
                        continue
                    if dst_file.exists() and not os.access(dst_file, os.W_OK):
                        dst_file.unlink()
                    shutil.copy2(src_file, dst_file)
        except OSError as e:
            return CommandResult(_oserror_code(e), stderr=str(e))
        return CommandResult(0)
