import ipaddress
import re
from typing import Tuple
from urllib.parse import urlparse

_HOST_LABEL = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")


def is_valid_hostname(hostname: str) -> bool:
    """DNS name (IDN allowed) or IP literal; no whitespace or stray punctuation."""
    if ":" in hostname:
        try:
            ipaddress.ip_address(hostname)
        except ValueError:
            return False
        return True

    try:
        ascii_host = hostname.encode("idna").decode("ascii")
    except UnicodeError:
        return False

    labels = ascii_host[:-1].split(".") if ascii_host.endswith(".") else ascii_host.split(".")
    return len(ascii_host) <= 253 and all(_HOST_LABEL.match(label) for label in labels)


def validate_url(url: str) -> Tuple[bool, str, str]:
    """Check that ``url`` is an absolute http(s) URL with a well-formed host.

    Unlike a browser address bar, no scheme is assumed: ``example.com`` is
    rejected so callers must say ``http://`` or ``https://`` explicitly.
    Returns ``(is_valid, stripped_url, error_message)``.
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "", "A valid URL is required."

    url = url.strip()

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, url, f"URL parsing error: {str(e)}"

    if not parsed.scheme:
        return False, url, "Invalid URL format. Please include http:// or https://"

    if parsed.scheme not in ["http", "https"]:
        return False, url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)"

    if not parsed.netloc or not parsed.hostname:
        return False, url, "Invalid URL format: missing domain"

    if not is_valid_hostname(parsed.hostname):
        return False, url, f"Invalid URL format: bad host '{parsed.hostname}'"

    try:
        parsed.port
    except ValueError:
        return False, url, "Invalid URL format: bad port"

    return True, url, ""
