"""
crawl_hooks/utils/exceptions.py

Custom exceptions for crawl-hooks.

Contains:
- CrawlHooksError: Base exception
- PropertyLockedError, UnknownMemberError: Host capability access failures
- PathSyntaxError: Unsupported CSS path / XPath syntax
- UnsupportedFileFormat: Unsupported input file type
"""


class CrawlHooksError(Exception):
    """
    Base exception for all crawl-hooks errors.
    """


class PropertyLockedError(CrawlHooksError, AttributeError):
    """
    Raised when assigning, deleting or redefining a host member that was
    marked non-writable or non-configurable.
    """


class UnknownMemberError(CrawlHooksError, AttributeError):
    """
    Raised when a host capability object has no member with the requested name.
    """


class PathSyntaxError(CrawlHooksError, ValueError):
    """
    Raised when a CSS path or XPath uses syntax the resolver does not support.
    """


class UnsupportedFileFormat(CrawlHooksError):
    """
    Raised when a file of an unsupported type is loaded.
    """
