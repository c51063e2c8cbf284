import pytest

from a11ycheck.platform.utils.url_validator import is_valid_hostname, validate_url


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://localhost:8000/page?q=1",
        "  https://example.com/a  ",
        "https://sub-domain.example.co.uk/path with space",
        "http://127.0.0.1:3000",
        "http://[::1]:8080/",
        "https://bücher.example/",
    ],
)
def test_valid_urls(url):
    is_valid, cleaned, error = validate_url(url)
    assert is_valid
    assert cleaned == url.strip()
    assert error == ""


@pytest.mark.parametrize(
    "url,message",
    [
        (None, "A valid URL is required."),
        ("", "A valid URL is required."),
        ("   ", "A valid URL is required."),
        ("example.com", "Invalid URL format. Please include http:// or https://"),
        ("http://exa mple.com", "Invalid URL format: bad host 'exa mple.com'"),
    ],
)
def test_invalid_urls(url, message):
    is_valid, _, error = validate_url(url)
    assert not is_valid
    assert error == message


@pytest.mark.parametrize(
    "url",
    [
        "ftp://example.com",
        "javascript:alert(1)",
        "https://",
        "http://example.com:99999",
        "http://example..com",
        "http://bad!host.com",
        "http://-leading.example.com",
    ],
)
def test_rejected_schemes_and_hosts(url):
    is_valid, _, error = validate_url(url)
    assert not is_valid
    assert error


def test_is_valid_hostname():
    assert is_valid_hostname("example.com")
    assert is_valid_hostname("example.com.")
    assert is_valid_hostname("::1")
    assert not is_valid_hostname("exa mple.com")
    assert not is_valid_hostname("a" * 64 + ".com")
