# File: pageripper/parser/link_parser.py
"""Streaming link and hostname extraction.

The response body is read chunk by chunk, decoded incrementally and fed to
:class:`html.parser.HTMLParser`; the document is never held in memory as a
whole. Every ``<a href="…">`` start tag yields up to two events on the fan-in
queue:

* ``HOST`` – host component of the raw reference (``""`` for relative paths),
  sent only when the reference parses as a request URI;
* ``LINK`` – the reference itself, made absolute against the target when it
  was relative.

Malformed markup, read errors and premature EOF end extraction quietly; a
single ``PARSE_DONE`` event is always sent when the parser returns normally.
"""
from __future__ import annotations

import asyncio
import codecs
import posixpath
from html.parser import HTMLParser
from typing import List, Literal, Optional, Protocol, Tuple
from urllib.parse import SplitResult, urljoin, urlsplit

from aiohttp import ClientError
from bs4.dammit import EncodingDetector

from pageripper.logger import get_logger
from pageripper.models import Event, ScrapeTarget, Signal

__all__ = (
    "ByteStream",
    "AnchorCollector",
    "StreamDecoder",
    "parse",
    "parse_reference",
    "host_of",
    "join_link",
)

logger = get_logger("parser")

LinkJoin = Literal["uri", "path"]

#: hrefs that never produce a link or a host
_SKIPPED_HREFS = frozenset({"", "/", "#"})
#: bytes inspected for a BOM or <meta charset> before decoding starts
_SNIFF_BYTES = 1024
_FALLBACK_ENCODING = "utf-8"


class ByteStream(Protocol):
    """Readable body handed over to the parser, which closes it when done."""

    async def read(self, n: int = -1) -> bytes: ...

    def close(self) -> None: ...


def parse_reference(raw: str) -> Optional[SplitResult]:
    """Parse *raw* as a request URI: an absolute URI or an absolute path.

    Returns ``None`` for anything else (``page.html``, ``#top``, ``?q=1``), for
    values starting with whitespace or a control character (which
    :func:`urllib.parse.urlsplit` would silently strip) and for values it rejects.
    """
    if raw[:1] <= " ":
        return None
    try:
        parts = urlsplit(raw)
    except ValueError:
        return None
    if parts.scheme or raw.startswith("/"):
        return parts
    return None


def host_of(parts: SplitResult) -> str:
    """Host of *parts* as written: case kept, userinfo, port and IPv6 brackets removed."""
    host = parts.netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:].partition("]")[0]
    return host.partition(":")[0]


def join_link(base: str, reference: str, style: LinkJoin = "uri") -> str:
    """Make *reference* absolute against *base*.

    ``uri`` applies RFC 3986 reference resolution. ``path`` glues both strings
    with a slash and cleans the result lexically, the way the first versions
    of the service did (``https://site.test/page`` + ``/about`` gives
    ``https:/site.test/page/about``).
    """
    if style == "path":
        return posixpath.normpath(f"{base}/{reference}")
    return urljoin(base, reference)


class StreamDecoder:
    """Incremental bytes → str decoder that sniffs the encoding from the first bytes."""

    def __init__(self) -> None:
        self.encoding: Optional[str] = None
        self._decoder: Optional[codecs.IncrementalDecoder] = None
        self._head = b""

    def decode(self, chunk: bytes, final: bool = False) -> str:
        if self._decoder is None:
            self._head += chunk
            if len(self._head) < _SNIFF_BYTES and not final:
                return ""
            data, bom_encoding = EncodingDetector.strip_byte_order_mark(self._head)
            self._head = b""
            self._decoder = self._open(data, bom_encoding)
            return self._decoder.decode(data, final)
        return self._decoder.decode(chunk, final)

    def _open(self, head: bytes, bom_encoding: Optional[str]) -> codecs.IncrementalDecoder:
        encoding = bom_encoding or EncodingDetector.find_declared_encoding(head, is_html=True)
        if encoding and not bom_encoding and encoding.lower().startswith(("utf-16", "utf-32")):
            # an ASCII-compatible document cannot really be UTF-16
            encoding = None
        try:
            factory = codecs.getincrementaldecoder(encoding or _FALLBACK_ENCODING)
        except LookupError:
            logger.debug("Unknown declared encoding %r, using %s", encoding, _FALLBACK_ENCODING)
            encoding = None
            factory = codecs.getincrementaldecoder(_FALLBACK_ENCODING)
        self.encoding = encoding or _FALLBACK_ENCODING
        return factory(errors="replace")


class AnchorCollector(HTMLParser):
    """Tokenizer consumer that records host and link events for anchor start tags."""

    def __init__(self, target: ScrapeTarget, link_join: LinkJoin = "uri") -> None:
        super().__init__(convert_charrefs=True)
        self.target = target
        self.link_join = link_join
        self._pending: List[Tuple[Signal, str]] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag != "a":
            return
        for name, value in attrs:
            if name == "href":
                self._anchor(value or "")
                break

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        # <a href="…"/> is a self-closing token, not a start tag
        pass

    def _anchor(self, raw: str) -> None:
        if raw in _SKIPPED_HREFS:
            return
        link = raw
        ref = parse_reference(raw)
        if ref is not None:
            self._pending.append((Signal.HOST, host_of(ref)))
            if not ref.scheme:
                link = join_link(str(self.target), raw, self.link_join)
        self._pending.append((Signal.LINK, link))

    def drain(self) -> List[Tuple[Signal, str]]:
        """Return and forget the events found since the previous call."""
        pending, self._pending = self._pending, []
        return pending


async def parse(
    target: ScrapeTarget,
    stream: ByteStream,
    queue: asyncio.Queue[Event],
    *,
    chunk_size: int = 8192,
    link_join: LinkJoin = "uri",
) -> None:
    """Extract links and hosts from *stream* onto *queue*, then send ``PARSE_DONE``.

    The stream is closed on every exit path, cancellation included.
    """
    collector = AnchorCollector(target, link_join)
    decoder = StreamDecoder()
    links = 0
    try:
        done = False
        while not done:
            try:
                chunk = await stream.read(chunk_size)
            except (ClientError, OSError, EOFError, asyncio.TimeoutError) as exc:
                logger.debug("Body of %s ended early: %s", target, exc)
                chunk = b""
            done = not chunk
            try:
                collector.feed(decoder.decode(chunk, final=done))
                if done:
                    collector.close()
            except (AssertionError, ValueError) as exc:
                logger.debug("Tokenizer stopped on %s: %s", target, exc)
                done = True
            for kind, value in collector.drain():
                await queue.put(Event(kind, value))
                if kind is Signal.LINK:
                    links += 1
    finally:
        stream.close()
    logger.debug("Parsed %s: %d links (%s)", target, links, decoder.encoding)
    await queue.put(Event(Signal.PARSE_DONE))
