"""Raw byte stream over a streamed file download."""

from __future__ import annotations

import io
from collections.abc import Iterator

import httpx

from .exceptions import ConnectionError, MalformedResponseError, TimeoutError


class FileStream(io.RawIOBase):
    """Readable binary stream backed by an open :class:`httpx.Response`.

    The response body is not buffered: bytes are pulled from the network
    as the stream is read. Closing the stream closes the response.

    Example:
        ```python
        with client.get_file_stream(deployment_id, file_id) as stream:
            shutil.copyfileobj(stream, destination)
        ```
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._chunks = response.iter_bytes()
        self._pending = b""
        # An empty body is an error, so pull the first chunk eagerly
        try:
            self._pending = self._next_chunk()
        except BaseException:
            response.close()
            raise
        if not self._pending:
            response.close()
            raise MalformedResponseError("Empty file body")

    @property
    def response(self) -> httpx.Response:
        return self._response

    def _next_chunk(self) -> bytes:
        try:
            for chunk in self._chunks:
                if chunk:
                    return chunk
        except httpx.TimeoutException as e:
            raise TimeoutError(f"File download timed out: {e}", cause=e) from e
        except httpx.TransportError as e:
            raise ConnectionError(f"Connection lost during file download: {e}", e) from e
        return b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        if not self._pending:
            self._pending = self._next_chunk()
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield the remaining body in network-sized chunks."""
        while True:
            chunk = self._pending or self._next_chunk()
            self._pending = b""
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()
