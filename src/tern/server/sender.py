"""Writing a :class:`~tern.http.response.Response` to an ASGI ``send``.

Pages are fully rendered before anything is sent, so every response is
one start message plus one body message with a known length.
"""

from tern._internal.asgi import Send
from tern.http.response import Response

# Statuses that never carry a message body
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Send *response*.

    ``HEAD`` responses keep the ``content-length`` of the ``GET`` body
    but send no bytes; 1xx, 204 and 304 responses send no bytes either.
    """
    body = response.body_bytes
    headers = _encode_headers(response, len(body))
    if method == "HEAD" or response.status < 200 or response.status in _BODYLESS:
        body = b""

    await send({"type": "http.response.start", "status": response.status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
