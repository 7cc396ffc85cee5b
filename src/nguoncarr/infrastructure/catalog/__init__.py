"""nguonc catalog adapters: id codec, normalizer, client, resolver, streams."""

from .client import HttpxCatalogClient
from .id_codec import decode, encode, qualify, strip_namespace
from .normalizer import normalize_detail, normalize_list
from .resolver import DetailResolver, first_success
from .streams import choose_stream, extract_streams

__all__ = [
    "DetailResolver",
    "HttpxCatalogClient",
    "choose_stream",
    "decode",
    "encode",
    "extract_streams",
    "first_success",
    "normalize_detail",
    "normalize_list",
    "qualify",
    "strip_namespace",
]
