from .validator import URLValidator, URL_PATTERN, system_resolver

__all__ = ["URLValidator", "URL_PATTERN", "system_resolver"]
