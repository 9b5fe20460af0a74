"""pageripper.parser: streaming HTML link extraction."""

from pageripper.parser.link_parser import ByteStream, join_link, parse, parse_reference

__all__ = ["ByteStream", "join_link", "parse", "parse_reference"]
