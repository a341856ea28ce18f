from pathlib import Path
from urllib.parse import urlsplit

import requests

from gopacked.adapters.errors import FetchError
from gopacked.domain.json_types import as_json_dict
from gopacked.domain.version import TOOL_VERSION

DEFAULT_TIMEOUT = 60
CHUNK_SIZE = 1024 * 1024


def normalize_url(url: str) -> str:
    if not urlsplit(url).scheme:
        return f"http://{url}"
    return url


class RequestsFetcher:
    def __init__(self, session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = f"gopacked/{TOOL_VERSION}"
        self.timeout = timeout

    def _get(self, url: str, *, stream: bool) -> requests.Response:
        target = normalize_url(url)
        try:
            response = self.session.get(target, stream=stream, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(
                f"Failed to fetch {target}",
                details=as_json_dict({"url": target}),
                cause=e,
            )
        return response

    def fetch_bytes(self, url: str) -> bytes:
        response = self._get(url, stream=False)
        if not response.content:
            raise FetchError(f"No data received from {url}", details=as_json_dict({"url": url}))
        return response.content

    def fetch_to_file(self, url: str, path: Path) -> None:
        response = self._get(url, stream=True)
        try:
            with path.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
        except requests.RequestException as e:
            path.unlink(missing_ok=True)
            raise FetchError(
                f"Download of {url} was interrupted",
                details=as_json_dict({"url": url, "path": str(path)}),
                cause=e,
            )
        finally:
            response.close()
