"""Document store backed by a REST endpoint.

Expects a simple document API:
    GET    {base_url}/{path}        -> document JSON (404 if missing)
    PUT    {base_url}/{path}        <- document JSON
    DELETE {base_url}/{path}
    GET    {base_url}/{collection}  -> {document_id: document}

Timeouts come from config.HTTP_TIMEOUT; retries are left to the server or
to re-running the (idempotent) operation.
"""

import requests

import config
from storage.document_store import DocumentStore, clean_path


class HttpDocumentStore(DocumentStore):

    def __init__(self, base_url: str, timeout: int = config.HTTP_TIMEOUT,
                 headers: dict | None = None, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{clean_path(path)}"

    def get(self, path: str) -> dict | None:
        resp = self.session.get(self._url(path), timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def set(self, path: str, data: dict):
        resp = self.session.put(self._url(path), json=data, timeout=self.timeout)
        resp.raise_for_status()

    def delete(self, path: str):
        resp = self.session.delete(self._url(path), timeout=self.timeout)
        if resp.status_code != 404:
            resp.raise_for_status()

    def list(self, collection: str) -> dict[str, dict]:
        resp = self.session.get(self._url(collection), timeout=self.timeout)
        if resp.status_code == 404:
            return {}
        resp.raise_for_status()
        return resp.json() or {}
