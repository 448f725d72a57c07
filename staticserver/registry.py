#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Path Registry Module for the Static File Server
-----------------------------------------------
The whitelist of request paths the server is willing to answer, built once
from the direct children of the static root.
"""

import os
import logging

logger = logging.getLogger('PathRegistry')


class StaticRootError(Exception):
    """Raised when the static root folder cannot be listed."""


class PathRegistry:
    """
    Immutable set of servable request paths.

    Every entry is a direct child name of the static root prefixed with
    ``/``. The registry is never mutated after construction, so handler
    threads can share it without locking.
    """

    def __init__(self, paths=()):
        self._paths = frozenset(paths)

    @classmethod
    def from_names(cls, names):
        """
        Build a registry from a directory listing.

        Args:
            names: Iterable of file names (no leading slash)

        Returns:
            PathRegistry: Registry containing ``"/" + name`` for every name
        """
        return cls('/' + name for name in names)

    @classmethod
    def load(cls, root_folder):
        """
        Build a registry from the immediate children of a folder.

        Subdirectories are listed but never descended into.

        Args:
            root_folder: Static root directory

        Returns:
            PathRegistry: The loaded registry

        Raises:
            StaticRootError: If the folder is missing or cannot be read
        """
        try:
            names = os.listdir(root_folder)
        except OSError as e:
            raise StaticRootError(f"Cannot list static root {root_folder!r}: {e}") from e

        registry = cls.from_names(names)
        logger.info(f"Registered {len(registry)} paths from {os.path.abspath(root_folder)}")
        return registry

    @property
    def paths(self):
        return self._paths

    def contains(self, path):
        return path in self._paths

    __contains__ = contains

    def __len__(self):
        return len(self._paths)

    def __iter__(self):
        return iter(sorted(self._paths))

    def __repr__(self):
        return f"PathRegistry({sorted(self._paths)!r})"
