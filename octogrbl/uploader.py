# octogrbl/uploader.py
import logging
import secrets

import httpx

from .errors import UploadError

ACCEPT = "application/json, text/javascript, */*; q=0.01"
ACCEPT_ENCODING = "gzip, deflate"
ACCEPT_LANGUAGE = "en-US,en;q=0.8"
BOUNDARY_PREFIX = "----OctoGrblFormBoundary"

# OctoPrint answers a stored upload with exactly this status
UPLOAD_CREATED = 201


def make_boundary(payload: bytes) -> str:
    """Returns a fresh multipart boundary whose delimiter is absent from ``payload``."""
    while True:
        boundary = BOUNDARY_PREFIX + secrets.token_hex(8)
        if b"--" + boundary.encode("ascii") not in payload:
            return boundary


def build_multipart_body(payload: bytes, filename: str, autoplay: bool, boundary: str) -> bytes:
    """
    Encodes the three form fields OctoPrint expects, in order: the G-code
    ``file``, ``select`` to make it the active job and ``print`` to start it.
    The filename is inserted verbatim.
    """
    delimiter = f"--{boundary}\r\n".encode("ascii")
    parts = [
        delimiter,
        f'Content-Disposition: form-data; name="file"; filename="{filename}"\r\n'.encode("utf-8"),
        b"Content-Type: application/octet-stream\r\n",
        b"\r\n",
        payload,
        b"\r\n",
        delimiter,
        b'Content-Disposition: form-data; name="select"\r\n',
        b"\r\n",
        b"true\r\n",
        delimiter,
        b'Content-Disposition: form-data; name="print"\r\n',
        b"\r\n",
        (b"true" if autoplay else b"false") + b"\r\n",
        f"--{boundary}--\r\n".encode("ascii"),
    ]
    return b"".join(parts)


class OctoPrintUploader:
    """
    Uploads a finished program to the OctoPrint files API.

    Starting the job is folded into the upload form (``print`` field), so
    :meth:`play` does not talk to the host.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str = "", autoplay: bool = False):
        self._client = client
        self._api_key = api_key
        self.autoplay = autoplay

    def _headers(self, boundary: str):
        return {
            "Content-Type": f"multipart/form-data; boundary={boundary}",
            "Accept": ACCEPT,
            "X-Api-Key": self._api_key,
            "Accept-Encoding": ACCEPT_ENCODING,
            "Accept-Language": ACCEPT_LANGUAGE,
        }

    async def upload(self, url: str, data: str, filename: str) -> None:
        """
        POSTs ``data`` as ``filename`` to ``url``. Raises :class:`UploadError`
        unless the host answers ``201 Created``. Never retried: a repeated
        upload would duplicate the file and restart the job.
        """
        payload = data.encode("utf-8")
        boundary = make_boundary(payload)
        body = build_multipart_body(payload, filename, self.autoplay, boundary)

        logging.info(f"Uploading {filename} ({len(payload)} bytes) to {url}, print={self.autoplay}")
        try:
            r = await self._client.post(url, content=body, headers=self._headers(boundary))
        except httpx.RequestError as e:
            logging.error(f"Upload of {filename} to {url} failed: {e!r}")
            raise UploadError(f"Error during upload: {type(e).__name__}: {e}") from e
        except UnicodeEncodeError as e:
            # only the API key is user supplied among the headers; keep it out of the message
            logging.error(f"Upload of {filename} to {url} failed: request headers are not ASCII")
            raise UploadError("Error during upload: API key cannot be sent in an HTTP header") from e

        if r.status_code != UPLOAD_CREATED:
            logging.error(f"Upload of {filename} rejected by {url}: HTTP {r.status_code}")
            raise UploadError(
                f"Error during upload: print host answered HTTP {r.status_code} {r.reason_phrase}".rstrip(),
                status_code=r.status_code,
            )
        logging.info(f"Upload of {filename} accepted by print host")

    async def play(self, filename: str) -> None:
        pass
