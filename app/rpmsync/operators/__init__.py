"""Operators that act on the target tree.

This module exports the filesystem gateway and the rsync copier.
"""

from rpmsync.operators.filesystem import FileSystemGateway, RemovalResult
from rpmsync.operators.rsync import RsyncCopier

__all__ = ["FileSystemGateway", "RemovalResult", "RsyncCopier"]
