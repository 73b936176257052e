"""Build the request forwarded into a tenant's execution context."""

from urllib.parse import unquote, urlsplit, urlunsplit

from src.frontdoor.dispatch.classifier import RoutingDecision
from src.frontdoor.registry import ForwardRequest


def strip_path_prefix(path: str, prefix: str | None) -> str:
    """Remove the routing prefix segment from a raw path; an empty result becomes '/'.

    `path` keeps its percent-encoding and is returned that way. The first
    segment is compared decoded, so `/%64emo/x` loses `/demo` like `/demo/x`.
    """
    if prefix:
        head, sep, rest = path[1:].partition("/")
        if "/" + unquote(head) == prefix:
            path = sep + rest
    return path or "/"


def rewrite_request(
    *,
    method: str,
    url: str,
    headers: list[tuple[str, str]],
    body: bytes,
    decision: RoutingDecision,
) -> ForwardRequest:
    """Rewrite the URL path for forwarding, keeping everything else verbatim.

    Only path-based routing carries a prefix to strip; hostname and
    subdomain routing forward the path unchanged. Query string and
    fragment pass through untouched.
    """
    parts = urlsplit(url)
    path = strip_path_prefix(parts.path, decision.path_prefix_to_strip)
    return ForwardRequest(
        method=method,
        url=urlunsplit(parts._replace(path=path)),
        headers=list(headers),
        body=body,
    )
