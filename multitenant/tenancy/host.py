"""
Host Applications
=================

The narrow surface a tenant directory registers itself into.

``Directory.register_paths`` never touches a global container; it only calls
the capabilities declared on ``HostApplication``. Two hosts are provided:

- ``Application``: a plain in-process host backed by a ``ConfigRepository``
- ``FlaskApplication``: an adapter over a ``flask.Flask`` instance
"""

import hashlib
import importlib.util
import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set

from flask import Flask
from jinja2 import ChoiceLoader, FileSystemLoader

from ..config.config_manager import ConfigRepository
from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)


def new_registry() -> Dict[str, Any]:
    return {"view_locations": [], "vendor_paths": [], "loaded_routes": set()}


class HostApplication(ABC):
    """Capabilities a host application exposes to tenant registration."""

    def __init__(self, extend_sys_path: bool = True):
        self.extend_sys_path = extend_sys_path
        self._registry: Dict[str, Any] = new_registry()

    def registry(self) -> Dict[str, Any]:
        """Registration state: view locations, vendor paths and loaded routes files."""
        return self._registry

    @property
    def view_locations(self) -> List[str]:
        return self.registry()["view_locations"]

    @property
    def vendor_paths(self) -> List[str]:
        return self.registry()["vendor_paths"]

    @property
    def _loaded_routes(self) -> Set[str]:
        return self.registry()["loaded_routes"]

    @abstractmethod
    def get_config_namespace(self, namespace: str) -> Dict[str, Any]:
        """Get a copy of a configuration namespace, empty when unknown."""
        pass

    @abstractmethod
    def set_config_namespace(self, namespace: str, values: Dict[str, Any]):
        """Replace a configuration namespace."""
        pass

    @abstractmethod
    def add_view_location(self, path: str):
        """Append a template lookup location."""
        pass

    @abstractmethod
    def get_cache_prefix(self) -> str:
        pass

    @abstractmethod
    def set_cache_prefix(self, prefix: str):
        pass

    @abstractmethod
    def set_translator(self, translator):
        """Install the translator used for subsequent lookups."""
        pass

    @abstractmethod
    def routes_target(self) -> Any:
        """Object exposed as ``app`` to tenant routes files."""
        pass

    def config_value(self, key: str, default: Any = None) -> Any:
        """Read a dotted configuration key through its namespace."""
        namespace, _, rest = key.partition(".")
        current: Any = self.get_config_namespace(namespace)
        if not rest:
            return current or default

        for segment in rest.split("."):
            if not isinstance(current, dict) or segment not in current:
                return default
            current = current[segment]
        return current

    def fallback_lang_paths(self) -> List[str]:
        """Language directories consulted after a tenant's own."""
        lang_path = self.config_value("app.lang_path")
        return [lang_path] if lang_path else []

    def add_vendor_path(self, path: str):
        """Register an additional import source directory."""
        if path in self.vendor_paths:
            return

        self.vendor_paths.append(path)
        if self.extend_sys_path and path not in sys.path:
            sys.path.append(path)
        logger.debug(f"Added vendor path {path}")

    def load_routes(self, path: str) -> bool:
        """
        Execute a routes file once.

        The file runs as a fresh module with ``app`` bound to
        ``routes_target()``. Returns False when the file was already loaded.
        """
        path = os.path.realpath(path)
        if path in self._loaded_routes:
            return False

        module_name = "tenant_routes_" + hashlib.sha1(path.encode()).hexdigest()[:12]
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ConfigurationError(f"Cannot load routes file {path}", path=path)

        module = importlib.util.module_from_spec(spec)
        module.app = self.routes_target()
        self._loaded_routes.add(path)
        spec.loader.exec_module(module)

        logger.info(f"Loaded tenant routes from {path}")
        return True

    def loaded_routes(self) -> List[str]:
        return sorted(self._loaded_routes)


class Application(HostApplication):
    """
    In-process host application.

    Configuration lives in a ``ConfigRepository``; the cache prefix is the
    ``cache.prefix`` key. Routes files receive this object as ``app`` and may
    register handlers through ``add_route``.
    """

    def __init__(self, config: Optional[ConfigRepository] = None, extend_sys_path: bool = True):
        super().__init__(extend_sys_path)
        self.config = config or ConfigRepository()
        self.translator = None
        self.routes: Dict[str, Any] = {}

    def get_config_namespace(self, namespace: str) -> Dict[str, Any]:
        return self.config.namespace(namespace)

    def set_config_namespace(self, namespace: str, values: Dict[str, Any]):
        self.config.set_namespace(namespace, values)

    def config_value(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def add_view_location(self, path: str):
        if path not in self.view_locations:
            self.view_locations.append(path)

    def get_cache_prefix(self) -> str:
        return self.config.get("cache.prefix", "")

    def set_cache_prefix(self, prefix: str):
        self.config.set("cache.prefix", prefix)

    def set_translator(self, translator):
        self.translator = translator

    def routes_target(self) -> Any:
        return self

    def add_route(self, rule: str, handler: Any):
        """Register a handler for a URL rule."""
        self.routes[rule] = handler


class FlaskApplication(HostApplication):
    """
    Adapter exposing a Flask app as a tenant host.

    Namespaces are stored as mappings in ``app.config`` under the namespace
    name. Tenant views are chained after the app's own Jinja loader, the cache
    prefix is ``CACHE_KEY_PREFIX`` and the translator is kept in
    ``app.extensions["translator"]`` and exposed to templates as ``trans``.
    """

    def __init__(self, flask_app: Flask, extend_sys_path: bool = True):
        super().__init__(extend_sys_path)
        self.flask_app = flask_app

    def registry(self) -> Dict[str, Any]:
        # shared by every adapter over the same Flask app
        return self.flask_app.extensions.setdefault("multitenant", new_registry())

    def get_config_namespace(self, namespace: str) -> Dict[str, Any]:
        value = self.flask_app.config.get(namespace, {})
        return dict(value) if isinstance(value, dict) else {}

    def set_config_namespace(self, namespace: str, values: Dict[str, Any]):
        self.flask_app.config[namespace] = dict(values)

    def add_view_location(self, path: str):
        if path in self.view_locations:
            return

        self.view_locations.append(path)
        loaders = []
        current = self.flask_app.jinja_loader
        if isinstance(current, ChoiceLoader):
            loaders.extend(current.loaders)
        elif current is not None:
            loaders.append(current)
        loaders.append(FileSystemLoader(path))

        self.flask_app.jinja_loader = ChoiceLoader(loaders)

    def get_cache_prefix(self) -> str:
        return self.flask_app.config.get("CACHE_KEY_PREFIX", "")

    def set_cache_prefix(self, prefix: str):
        self.flask_app.config["CACHE_KEY_PREFIX"] = prefix

    def set_translator(self, translator):
        self.flask_app.extensions["translator"] = translator
        self.flask_app.jinja_env.globals["trans"] = translator.get

    def routes_target(self) -> Any:
        return self.flask_app
