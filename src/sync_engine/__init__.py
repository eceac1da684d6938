"""Sync engine module for reconciling vault files with ClickUp Doc pages.

This module provides the identity mapping, remote tree building, parent
inference, and the upload and download reconcilers, plus the orchestrator
that runs them across configured sync targets.
"""

from .config_loader import ConfigLoader
from .downloader import Downloader
from .errors import ConfigError, PageContentError, PageFetchError, SyncEngineError
from .models import (
    RemotePage,
    RemotePageNode,
    SyncConfig,
    SyncCounts,
    SyncReport,
    SyncTarget,
    TargetReport,
)
from .orchestrator import SyncOrchestrator
from .page_mapping import PageMapping
from .parent_resolver import relative_segments, resolve_parent
from .session import SyncSession
from .tree_builder import PageTree, RemoteTreeBuilder, build_tree
from .uploader import Uploader

__all__ = [
    'ConfigError',
    'ConfigLoader',
    'Downloader',
    'PageContentError',
    'PageFetchError',
    'PageMapping',
    'PageTree',
    'RemotePage',
    'RemotePageNode',
    'RemoteTreeBuilder',
    'SyncConfig',
    'SyncCounts',
    'SyncEngineError',
    'SyncOrchestrator',
    'SyncReport',
    'SyncSession',
    'SyncTarget',
    'TargetReport',
    'Uploader',
    'build_tree',
    'relative_segments',
    'resolve_parent',
]
