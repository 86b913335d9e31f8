from urllib.parse import quote, urlparse

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"

def encode_uri_component(value: str) -> str:
    """Percent-encode a value for use as a single query parameter"""
    return quote(value, safe=_URI_COMPONENT_SAFE)

def safe_url_for_log(url: str) -> str:
    """Strip query and fragment so tokens never land in logs"""
    try:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    except ValueError:
        return "invalid_url"
