"""
Tenant Directories
==================

Per-website directory tree and its registration into a host application.

Layout::

    {root}/{id}-{identifier}/
        config/   merged over the host configuration, one file per namespace
        views/    additional template location
        lang/     translation files, consulted before the host's own
        vendor/   additional import path
        cache/
        media/
        routes.py optional, executed once in the host routing context

The root is ``multi-tenant.tenant-directory`` when configured, otherwise
``{app.storage_path}/multi-tenant``.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.config_manager import ConfigRepository, MAPPING_FILE_EXTENSIONS, read_mapping_file
from ..error_handling import DirectoryError
from .host import HostApplication
from .models import Website
from .translation import FileLoader, Translator

logger = logging.getLogger(__name__)

DIRECTORY_MODE = 0o755
ROUTES_FILE = "routes.py"


class DirectoryKind(Enum):
    """Fixed subdirectories of a tenant base path."""
    CONFIG = "config"
    VIEWS = "views"
    LANG = "lang"
    VENDOR = "vendor"
    CACHE = "cache"
    MEDIA = "media"


class CreationStatus(Enum):
    """Outcome of creating one tenant directory."""
    CREATED = "created"
    EXISTED = "existed"
    FAILED = "failed"


@dataclass
class CreationEntry:
    path: str
    status: CreationStatus
    error: Optional[str] = None


@dataclass
class CreationReport:
    """Per-directory result of ``Directory.create``."""
    entries: Dict[str, CreationEntry] = field(default_factory=dict)

    def add(self, name: str, entry: CreationEntry):
        self.entries[name] = entry

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def done(self) -> int:
        return sum(1 for e in self.entries.values() if e.status != CreationStatus.FAILED)

    @property
    def success(self) -> bool:
        return self.total > 0 and self.done == self.total

    def failed(self) -> List[CreationEntry]:
        return [e for e in self.entries.values() if e.status == CreationStatus.FAILED]

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: {"path": e.path, "status": e.status.value, "error": e.error}
            for name, e in self.entries.items()
        }


def resolve_tenant_root(config: Optional[ConfigRepository]) -> Optional[str]:
    """Determine the directory holding all tenant trees, or None."""
    if config is None:
        return None

    root = config.get("multi-tenant.tenant-directory")
    if not root:
        storage_path = config.get("app.storage_path")
        if not storage_path:
            return None
        root = os.path.join(storage_path, "multi-tenant")

    return root.rstrip("/") or "/"


def tenant_path(root: Optional[str], website_id: int, identifier: Optional[str]) -> Optional[str]:
    """``{root}/{id}-{identifier}/`` or None when the root is unknown."""
    if not root or not identifier:
        return None
    return "%s/%d-%s/" % (root.rstrip("/"), website_id, identifier)


class Directory:
    """
    Tenant directory resolver for a single website.

    Paths are computed once at construction; every accessor returns None
    rather than raising when the tenant root cannot be determined.
    """

    def __init__(self, website: Website, root: Optional[str] = None,
                 config: Optional[ConfigRepository] = None):
        self.website = website
        self.root = root if root is not None else resolve_tenant_root(config)

        self.old_path: Optional[str] = None
        if self.website.is_identifier_dirty():
            candidate = tenant_path(self.root, website.id, website.previous_identifier)
            if candidate and os.path.isdir(candidate):
                self.old_path = candidate

        self.base_path = tenant_path(self.root, website.id, website.identifier)

    def base(self) -> Optional[str]:
        """Tenant base path."""
        return self.base_path

    def old_base(self) -> Optional[str]:
        """Base path under the previous identifier, only if it exists on disk."""
        return self.old_path

    def path(self, kind: DirectoryKind) -> Optional[str]:
        """Path of a fixed tenant subdirectory."""
        base = self.base()
        return f"{base}{kind.value}/" if base else None

    def config(self) -> Optional[str]:
        return self.path(DirectoryKind.CONFIG)

    def views(self) -> Optional[str]:
        return self.path(DirectoryKind.VIEWS)

    def lang(self) -> Optional[str]:
        return self.path(DirectoryKind.LANG)

    def vendor(self) -> Optional[str]:
        return self.path(DirectoryKind.VENDOR)

    def cache(self) -> Optional[str]:
        return self.path(DirectoryKind.CACHE)

    def media(self) -> Optional[str]:
        return self.path(DirectoryKind.MEDIA)

    def paths(self) -> Dict[DirectoryKind, Optional[str]]:
        return {kind: self.path(kind) for kind in DirectoryKind}

    def routes(self) -> Optional[str]:
        """Path to the tenant routes file if it exists."""
        base = self.base()
        if not base:
            return None

        routes = f"{base}{ROUTES_FILE}"
        return routes if os.path.isfile(routes) else None

    def create(self) -> CreationReport:
        """
        Create the base directory and all subdirectories.

        Existing directories count as done, so running this twice succeeds
        both times. Directories created before a failure are left in place.
        """
        report = CreationReport()
        base = self.base()
        if not base:
            logger.warning(f"No tenant root configured, cannot create directories for website {self.website.id}")
            return report

        targets = [("base", base)] + [(kind.value, self.path(kind)) for kind in DirectoryKind]
        for name, target in targets:
            report.add(name, self._make_directory(target))

        if report.success:
            logger.info(f"Tenant directories ready for website {self.website.id} at {base}")
        else:
            for entry in report.failed():
                logger.error(f"Failed to create tenant directory {entry.path}: {entry.error}")

        return report

    def _make_directory(self, path: str) -> CreationEntry:
        if os.path.isdir(path):
            return CreationEntry(path, CreationStatus.EXISTED)

        try:
            os.makedirs(path, mode=DIRECTORY_MODE, exist_ok=True)
        except OSError as e:
            return CreationEntry(path, CreationStatus.FAILED, str(e))
        return CreationEntry(path, CreationStatus.CREATED)

    def migrate_old_base(self) -> bool:
        """
        Move the directory of the previous identifier to the current base.

        Only moves when the old directory exists and the new one does not.
        """
        old, base = self.old_base(), self.base()
        if not old or not base or os.path.exists(base):
            return False

        try:
            shutil.move(old.rstrip("/"), base.rstrip("/"))
        except OSError as e:
            raise DirectoryError(f"Unable to move {old} to {base}", original_error=e,
                                 website_id=self.website.id)

        logger.info(f"Moved tenant directory of website {self.website.id} from {old} to {base}")
        self.old_path = None
        self.website.sync_original()
        return True

    def register_paths(self, host: HostApplication) -> 'Directory':
        """Register all available tenant paths into the host application."""
        if not self.base():
            return self

        views = self.views()
        if views and os.path.isdir(views):
            host.add_view_location(views)

        config = self.config()
        if config and os.path.isdir(config):
            self._merge_config(host, config)

        vendor = self.vendor()
        if vendor and os.path.isdir(vendor):
            host.add_vendor_path(vendor)

        host.set_cache_prefix(f"{host.get_cache_prefix()}-{self.website.id}")

        lang = self.lang()
        if lang and os.path.isdir(lang):
            loader = FileLoader([lang] + host.fallback_lang_paths())
            translator = Translator(
                loader,
                host.config_value("app.locale", "en"),
                host.config_value("app.fallback_locale")
            )
            host.set_translator(translator)

        routes = self.routes()
        if routes:
            host.load_routes(routes)

        logger.debug(f"Registered tenant paths for website {self.website.id}")
        return self

    def _merge_config(self, host: HostApplication, config_path: str):
        """Overlay every config file on the host namespace named after it."""
        for entry in sorted(os.listdir(config_path)):
            file_path = os.path.join(config_path, entry)
            namespace, extension = os.path.splitext(entry)
            if not os.path.isfile(file_path) or extension not in MAPPING_FILE_EXTENSIONS:
                continue

            overrides = read_mapping_file(file_path)
            merged = host.get_config_namespace(namespace)
            merged.update(overrides)
            host.set_config_namespace(namespace, merged)

            logger.debug(f"Merged {len(overrides)} config keys into {namespace} for website {self.website.id}")
