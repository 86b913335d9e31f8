from .urls import encode_uri_component, safe_url_for_log

__all__ = ["encode_uri_component", "safe_url_for_log"]
