"""
Error taxonomy for the content layer.

ConfigurationError is fatal (missing env, homepage without headshot).
ContentFetchError wraps a failed single-document fetch that cannot degrade.
CMSRequestError is raised by the CMS client on transport/query failures.
"""
from typing import Optional


class ContentError(Exception):
    """Base class for content layer failures"""


class ConfigurationError(ContentError):
    pass


class ContentFetchError(ContentError):
    pass


class CMSRequestError(ContentError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
