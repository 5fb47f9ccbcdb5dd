"""
Repository clients.

Provides the RepositoryClient contract and its Subversion command-line
implementation.
"""

from .base import RepositoryClient
from .svn_cli import SvnCommandClient, parse_svn_date, validate_repository_url

__all__ = [
    "RepositoryClient",
    "SvnCommandClient",
    "parse_svn_date",
    "validate_repository_url",
]
