"""HTTP requests returning JSON, raw data or a downloaded file."""

from __future__ import annotations

import contextlib
import enum
import glob
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

import requests

log = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class HttpMethod(enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class ResultType(enum.Enum):
    JSON = "json"
    RAW_DATA = "raw"
    FILE = "file"


class RequestStatus(enum.Enum):
    SUCCESS = 0
    HTTP_ERROR = 1
    JSON_PARSE_ERROR = 2


@dataclass
class RequestResult:
    status: RequestStatus
    data: bytes = b""
    json: Any = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is RequestStatus.SUCCESS


class NetworkRequest:
    """One HTTP request; SSL errors are reported and then ignored."""

    def __init__(self, url="", method=HttpMethod.GET, result_type=ResultType.JSON, session=None):
        self.url = url
        self.method = HttpMethod(method)
        self.result_type = ResultType(result_type)
        self.session = session if session is not None else requests.Session()
        self.post_data = b""
        self.file: Union[str, os.PathLike, Any, None] = None
        self.headers: dict[str, str] = {}
        self.certificates: list[Path] = []
        self.on_data: Optional[Callable[[bytes], None]] = None
        self.last_error = ""
        self._running = False

    def set_header(self, header, value) -> None:
        self.headers[header] = value

    def set_certificate(self, path) -> None:
        """Trust the PEM certificates matching ``path`` (wildcards allowed)."""
        self.certificates.extend(Path(p) for p in sorted(glob.glob(str(path))))

    def start(self) -> RequestResult:
        """Run the request and return its outcome."""
        if self._running:
            raise RuntimeError("Request already in progress")
        if self.result_type is ResultType.FILE and self.file is None:
            self.last_error = "no download file set, aborting request."
            raise ValueError(self.last_error)

        self._running = True
        self.last_error = ""
        log.debug("New request to %s", self.url)
        try:
            with self._verify() as verify:
                response = self._send(verify)
                try:
                    return self._finish(response)
                finally:
                    response.close()
        except requests.RequestException as exc:
            self.last_error = str(exc)
            log.debug("Error in %s: %s", self.url, exc)
            return RequestResult(RequestStatus.HTTP_ERROR, error=self.last_error)
        finally:
            self._running = False

    @contextlib.contextmanager
    def _verify(self) -> Iterator[Union[bool, str]]:
        if not self.certificates:
            yield True
            return
        if len(self.certificates) == 1:
            yield str(self.certificates[0])
            return
        with tempfile.NamedTemporaryFile("wb", suffix=".pem", delete=False) as bundle:
            for cert in self.certificates:
                bundle.write(cert.read_bytes())
                bundle.write(b"\n")
        try:
            yield bundle.name
        finally:
            os.unlink(bundle.name)

    def _send(self, verify: Union[bool, str]) -> requests.Response:
        kwargs: dict[str, Any] = {
            "headers": dict(self.headers),
            "stream": True,
        }
        if self.method in (HttpMethod.POST, HttpMethod.PUT):
            kwargs["data"] = self.post_data
        try:
            return self.session.request(self.method.value, self.url, verify=verify, **kwargs)
        except requests.exceptions.SSLError as exc:
            log.warning("SSL errors: %s", exc)
            return self.session.request(self.method.value, self.url, verify=False, **kwargs)

    @contextlib.contextmanager
    def _sink(self) -> Iterator[Any]:
        if self.result_type is not ResultType.FILE:
            yield None
        elif isinstance(self.file, (str, os.PathLike)):
            with open(self.file, "wb") as handle:
                yield handle
        else:
            yield self.file

    def _finish(self, response: requests.Response) -> RequestResult:
        chunks = []
        with self._sink() as sink:
            for chunk in response.iter_content(CHUNK_SIZE):
                if not chunk:
                    continue
                if sink is not None:
                    sink.write(chunk)
                if self.on_data is not None:
                    self.on_data(chunk)
                chunks.append(chunk)
        body = b"".join(chunks)

        if not response.ok:
            self.last_error = f"{response.status_code} {response.reason}"
            log.debug("Error in %s: %s", self.url, self.last_error)
            if self.result_type is ResultType.JSON:
                try:
                    doc = json.loads(body) if body else None
                except ValueError:
                    doc = None
                return RequestResult(RequestStatus.HTTP_ERROR, body, doc, self.last_error)
            return RequestResult(RequestStatus.HTTP_ERROR, error=self.last_error)

        if self.result_type is not ResultType.JSON:
            return RequestResult(RequestStatus.SUCCESS, body)

        if not body:
            # an empty answer is not an error
            return RequestResult(RequestStatus.SUCCESS, body)
        try:
            doc = json.loads(body)
        except ValueError as exc:
            message = getattr(exc, "msg", str(exc))
            offset = getattr(exc, "pos", 0)
            self.last_error = f"JSON parse error {message} at offset: {offset}"
            log.warning(self.last_error)
            return RequestResult(RequestStatus.JSON_PARSE_ERROR, body, None, self.last_error)
        return RequestResult(RequestStatus.SUCCESS, body, doc)