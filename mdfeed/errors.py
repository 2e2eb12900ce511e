from __future__ import annotations


class SiteGenError(Exception):
    pass


class ConfigError(SiteGenError):
    pass


class ContentDirError(SiteGenError):
    pass


class FrontMatterError(SiteGenError):
    pass


class PageFormatError(SiteGenError):
    pass


class MissingFieldError(SiteGenError):
    def __init__(self, field: str, index: int, reason: str = "missing") -> None:
        self.field = field
        self.index = index
        self.reason = reason
        super().__init__(f"page {index}: field {field!r} is {reason}")
