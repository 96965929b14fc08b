"""
HTTP execution service for sending pending requests.

Turns a PendingRequest plus an Environment into a live httpx call and a
captured response. One attempt per call, no retries. Every failure before
the response is captured raises a DispatchError subclass.
"""

import math
import re
import time
from datetime import datetime, timezone
from http.cookiejar import Cookie

import httpx

from ..exceptions import DispatchError, InvalidHeaderError, InvalidUrlError, TransportError
from ..logger import LOGGER
from ..schemas.environment import Environment
from ..schemas.execute import ResponseCapture, ResponseCookie
from ..schemas.project import Project
from ..schemas.request import PendingRequest
from .formatting import format_duration
from .request_url import RequestUrl
from .variable_substitution import substitute, substitute_pairs


log = LOGGER.getChild("executor")

# RFC 7230 token
HEADER_NAME_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Anything but horizontal tab and visible ASCII
INVALID_HEADER_VALUE_PATTERN = re.compile(r"[^\x09\x20-\x7e]")


def resolve_base_url(project: Project | None, environment: Environment | None) -> str:
    """Environment base URL, else the project's legacy base URL, else ""."""
    if environment is not None and environment.base_url:
        return environment.base_url
    if project is not None and project.base_url:
        return project.base_url
    return ""


def parse_url(raw: str) -> httpx.URL:
    """
    Parse an absolute http(s) URL.

    Raises:
        InvalidUrlError: if the URL is malformed, relative or has no host
    """
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidUrlError(f"Invalid URL {raw!r}: {e}") from e

    if url.scheme not in ("http", "https"):
        raise InvalidUrlError(f"Invalid URL {raw!r}: expected an http or https URL")
    if not url.host:
        raise InvalidUrlError(f"Invalid URL {raw!r}: empty host")
    return url


def validate_headers(headers: httpx.Headers) -> None:
    """
    Reject header names that are not tokens and values outside visible ASCII.

    Raises:
        InvalidHeaderError: on the first invalid header
    """
    for name, value in headers.multi_items():
        if not HEADER_NAME_PATTERN.match(name):
            raise InvalidHeaderError(f"Invalid header name: {name!r}")
        if INVALID_HEADER_VALUE_PATTERN.search(value):
            raise InvalidHeaderError(f"Invalid value for header {name!r}")


def cookie_domain(host: str) -> str:
    # http.cookiejar matches dotless hosts as "<host>.local"
    return host if "." in host else f"{host}.local"


def decode_body(response: httpx.Response) -> str:
    """Response body as text; an undecodable body is returned as ""."""
    try:
        return response.content.decode(response.charset_encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        return ""


def is_http_only(cookie: Cookie) -> bool:
    # Attribute names are case-insensitive, the jar keeps the sent spelling
    return any(name.lower() == "httponly" for name in cookie._rest)


def capture_cookies(response: httpx.Response) -> list[ResponseCookie]:
    cookies: list[ResponseCookie] = []
    for cookie in response.cookies.jar:
        expires = None
        if cookie.expires is not None:
            expires = datetime.fromtimestamp(cookie.expires, tz=timezone.utc)
        cookies.append(ResponseCookie(
            name=cookie.name,
            value=cookie.value,
            http_only=is_http_only(cookie),
            expires=expires,
        ))
    return cookies


def _warn(warnings: list[str], where: str, unmatched: list[str]) -> None:
    warnings.extend(f"Undefined variable in {where}: {{{{{v}}}}}" for v in unmatched)


async def send(
    request: PendingRequest,
    environment: Environment,
    base_url: str,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> ResponseCapture:
    """
    Execute a pending request and capture the response.

    Args:
        request: The request to execute (a snapshot, not the stored object)
        environment: Variables used for substitution
        base_url: Value for the project base URL sentinel
        timeout: Request timeout in seconds, None for no timeout
        transport: Optional httpx transport, used by tests

    Returns:
        The captured response

    Raises:
        InvalidUrlError: the resolved URL is malformed
        InvalidHeaderError: a header is invalid after substitution
        TransportError: connection, TLS or timeout failure
    """
    variables = environment.variables()
    warnings: list[str] = []

    # 1. URL: composer, then variables
    raw_url, unmatched = substitute(RequestUrl(request.url).build(base_url), variables)
    _warn(warnings, "URL", unmatched)
    url = parse_url(raw_url)

    # 2. Queries accumulate, duplicate keys allowed
    queries, unmatched = substitute_pairs(request.queries, variables)
    _warn(warnings, "query params", unmatched)
    for key, value in queries:
        url = url.copy_add_param(key, value)

    # 3. Cookies, scoped to the resolved host
    cookie_pairs, unmatched = substitute_pairs(request.cookies, variables)
    _warn(warnings, "cookies", unmatched)
    cookies = httpx.Cookies()
    for name, value in cookie_pairs:
        cookies.set(name, value, domain=cookie_domain(url.host))

    # 4. Headers; the body's content type overrides a user supplied one
    header_pairs, unmatched = substitute_pairs(request.headers, variables)
    _warn(warnings, "headers", unmatched)
    headers = httpx.Headers()
    for key, value in header_pairs:
        headers[key] = value
    if request.body.content_type:
        headers["Content-Type"] = request.body.content_type

    # 5. Authorization
    def resolve(template: str) -> str:
        result, missing = substitute(template, variables)
        _warn(warnings, "authorization", missing)
        return result

    request.authorization.apply_to_headers(headers, resolve)
    validate_headers(headers)

    log.info("(%s) %s", request.method.value, url)

    # 6. Dispatch
    try:
        async with httpx.AsyncClient(
            cookies=cookies,
            timeout=timeout,
            transport=transport,
        ) as client:
            start_time = time.perf_counter()
            response = await client.request(
                method=request.method.value,
                url=url,
                headers=headers,
                content=request.body.render(),
            )
            elapsed = time.perf_counter() - start_time
    except httpx.TimeoutException as e:
        raise TransportError(f"Request timed out: {e}") from e
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Invalid URL: {e}") from e
    except httpx.HTTPError as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e

    # 7. Capture
    body = decode_body(response)
    return ResponseCapture(
        status_code=response.status_code,
        status_text=response.reason_phrase or "",
        headers=list(response.headers.multi_items()),
        cookies=capture_cookies(response),
        body=body,
        size_kb=float(math.ceil(len(response.content) / 1024)),
        duration_ms=elapsed * 1000,
        duration=format_duration(elapsed),
        warnings=warnings,
    )


__all__ = ["DispatchError", "resolve_base_url", "send"]
