"""Canonical HTTPS form for user-supplied URLs (website and social links)."""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from core.exceptions import ValidationError

_DEFAULT_PORTS = {80, 443}

INVALID_URL_MESSAGE = "Please include a valid URL"


def normalize_url(raw: str, field: str = "url") -> str:
    """Normalize a URL and force the https scheme.

    - a missing scheme becomes ``https://``; ``http`` is upgraded
    - host is lowercased, a leading ``www.`` and default ports are removed
    - trailing slashes are stripped from the path
    - ``utm_*`` query parameters are dropped and the rest sorted by key

    Raises ValidationError for ``field`` when the value has no host or
    cannot be parsed (bad port, unbalanced IPv6 brackets).

    >>> normalize_url("http://www.Example.com:80/about/?utm_source=x&b=2&a=1")
    'https://example.com/about?a=1&b=2'
    """
    url = raw.strip()
    if url.startswith("//"):
        url = f"https:{url}"
    elif "://" not in url:
        url = f"https://{url}"

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise ValidationError(INVALID_URL_MESSAGE, field=field) from e

    host = (parts.hostname or "").lower()
    if not host:
        raise ValidationError(INVALID_URL_MESSAGE, field=field)
    if host.startswith("www.") and host.count(".") > 1:
        host = host[len("www."):]
    if ":" in host:
        host = f"[{host}]"

    netloc = host
    if port and port not in _DEFAULT_PORTS:
        netloc = f"{host}:{port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parts.path.rstrip("/")

    query_pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if not key.lower().startswith("utm_")
    ]
    query = urlencode(sorted(query_pairs))

    return urlunsplit(("https", netloc, path, query, parts.fragment))
