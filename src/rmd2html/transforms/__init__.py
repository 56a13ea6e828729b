"""Text transforms applied between render stages."""

from rmd2html.transforms.links import (
    LinkRewriter,
    auto_identifier,
    build_link_index,
    header_ids,
    rewrite_links,
)

__all__ = [
    "LinkRewriter",
    "auto_identifier",
    "build_link_index",
    "header_ids",
    "rewrite_links",
]
