# tests/test_uploader.py
import logging
import re
import secrets

import httpx
import pytest
from httpx import AsyncClient

from octogrbl.errors import UploadError
from octogrbl.uploader import BOUNDARY_PREFIX, OctoPrintUploader, build_multipart_body, make_boundary


URL = "http://octopi.local/api/files/local"
API_KEY = "S3CR3T-KEY-0123456789"
PROGRAM = "G21\nG90\nM3\nG0 X25.400000 Y50.800000 S0\nM5\nG0 X0 Y0\n"


def _boundary(request: httpx.Request) -> str:
    content_type = request.headers["Content-Type"]
    match = re.fullmatch(r"multipart/form-data; boundary=(\S+)", content_type)
    assert match, content_type
    return match.group(1)

def _parts(request: httpx.Request):
    """Splits the multipart body into (headers, body) pairs."""
    boundary = _boundary(request).encode()
    body = request.content
    assert body.endswith(b"--" + boundary + b"--\r\n")
    chunks = body.split(b"--" + boundary)
    assert chunks[0] == b""
    assert chunks[-1] == b"--\r\n"
    parts = []
    for chunk in chunks[1:-1]:
        assert chunk.startswith(b"\r\n") and chunk.endswith(b"\r\n")
        head, _, value = chunk[2:-2].partition(b"\r\n\r\n")
        parts.append((head.decode().split("\r\n"), value))
    return parts


async def test_upload_success(host_client: AsyncClient, print_host):
    """
    A 201 answer is success; exactly one request is sent, carrying the three form fields.
    """
    print_host.status_code = 201
    uploader = OctoPrintUploader(host_client, api_key=API_KEY, autoplay=True)

    await uploader.upload(URL, PROGRAM, "job.gcode")

    assert len(print_host.requests) == 1
    request = print_host.requests[0]
    assert request.method == "POST"
    assert str(request.url) == URL

    parts = _parts(request)
    assert [p[0][0] for p in parts] == [
        'Content-Disposition: form-data; name="file"; filename="job.gcode"',
        'Content-Disposition: form-data; name="select"',
        'Content-Disposition: form-data; name="print"',
    ]
    assert parts[0][0][1] == "Content-Type: application/octet-stream"
    assert parts[0][1] == PROGRAM.encode()
    assert parts[1][1] == b"true"
    assert parts[2][1] == b"true"

async def test_upload_without_autoplay(host_client: AsyncClient, print_host):
    uploader = OctoPrintUploader(host_client, api_key=API_KEY, autoplay=False)
    await uploader.upload(URL, PROGRAM, "job.gcode")
    parts = _parts(print_host.requests[0])
    assert parts[1][1] == b"true"
    assert parts[2][1] == b"false"

async def test_upload_headers(host_client: AsyncClient, print_host):
    uploader = OctoPrintUploader(host_client, api_key=API_KEY)
    await uploader.upload(URL, PROGRAM, "job.gcode")
    headers = print_host.requests[0].headers
    assert headers["X-Api-Key"] == API_KEY
    assert headers["Accept"] == "application/json, text/javascript, */*; q=0.01"
    assert "Accept-Encoding" in headers
    assert "Accept-Language" in headers
    assert _boundary(print_host.requests[0]).startswith(BOUNDARY_PREFIX)

async def test_api_key_only_in_header(host_client: AsyncClient, print_host, caplog):
    """
    The key is never part of the URL, the body, another header or the log.
    """
    caplog.set_level(logging.DEBUG)
    uploader = OctoPrintUploader(host_client, api_key=API_KEY)
    await uploader.upload(URL, PROGRAM, "job.gcode")

    request = print_host.requests[0]
    assert API_KEY not in str(request.url)
    assert API_KEY.encode() not in request.content
    others = [v for k, v in request.headers.items() if k.lower() != "x-api-key"]
    assert all(API_KEY not in v for v in others)
    assert API_KEY not in caplog.text

async def test_filename_is_verbatim(host_client: AsyncClient, print_host):
    uploader = OctoPrintUploader(host_client)
    await uploader.upload(URL, PROGRAM, "Laser Job (v2).gcode")
    parts = _parts(print_host.requests[0])
    assert parts[0][0][0].endswith('filename="Laser Job (v2).gcode"')

@pytest.mark.parametrize("status", [200, 202, 204, 400, 401, 409, 500])
async def test_upload_rejected_unless_created(host_client: AsyncClient, print_host, status):
    """
    Only 201 Created counts; other 2xx codes are failures too.
    """
    print_host.status_code = status
    uploader = OctoPrintUploader(host_client, api_key=API_KEY)
    with pytest.raises(UploadError) as exc_info:
        await uploader.upload(URL, PROGRAM, "job.gcode")
    assert exc_info.value.status_code == status
    assert "Error during upload" in str(exc_info.value)
    assert len(print_host.requests) == 1

async def test_upload_transport_failure(host_client: AsyncClient, print_host):
    print_host.error = httpx.ConnectError("Connection refused")
    uploader = OctoPrintUploader(host_client, api_key=API_KEY)
    with pytest.raises(UploadError) as exc_info:
        await uploader.upload(URL, PROGRAM, "job.gcode")
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert len(print_host.requests) == 1

async def test_play_sends_nothing(host_client: AsyncClient, print_host):
    uploader = OctoPrintUploader(host_client, autoplay=True)
    await uploader.play("job.gcode")
    assert print_host.requests == []

def test_boundary_avoids_payload(monkeypatch):
    """
    A boundary whose delimiter already occurs in the program is discarded.
    """
    tokens = iter(["aaaa", "bbbb"])
    monkeypatch.setattr(secrets, "token_hex", lambda n: next(tokens))
    payload = f"; --{BOUNDARY_PREFIX}aaaa\nG0 X0 Y0\n".encode()
    assert make_boundary(payload) == BOUNDARY_PREFIX + "bbbb"

def test_boundary_is_fresh():
    assert make_boundary(b"") != make_boundary(b"")

def test_multipart_body_layout():
    body = build_multipart_body(b"G0 X0 Y0\n", "a.gcode", False, "XYZ")
    assert body == (
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="file"; filename="a.gcode"\r\n'
        b"Content-Type: application/octet-stream\r\n"
        b"\r\n"
        b"G0 X0 Y0\n\r\n"
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="select"\r\n'
        b"\r\n"
        b"true\r\n"
        b"--XYZ\r\n"
        b'Content-Disposition: form-data; name="print"\r\n'
        b"\r\n"
        b"false\r\n"
        b"--XYZ--\r\n"
    )

async def test_non_ascii_api_key_is_upload_error(host_client: AsyncClient, print_host):
    """
    A key that cannot be encoded as a header value fails like any other upload,
    without echoing the key.
    """
    uploader = OctoPrintUploader(host_client, api_key="clé")
    with pytest.raises(UploadError) as exc_info:
        await uploader.upload(URL, PROGRAM, "job.gcode")
    assert "clé" not in str(exc_info.value)
    assert exc_info.value.status_code is None
    assert print_host.requests == []
