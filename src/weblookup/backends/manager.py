"""Backend manager: roster loading, import, activation."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from weblookup.backends.base import BackendContext, LookupBackend
from weblookup.backends.errors import BackendImportError, BackendRegistrationError
from weblookup.backends.hooks import HookRegistry
from weblookup.backends.manifest import BackendManifest, build_manifest_entry
from weblookup.config.loader import _get_config_dir

logger = logging.getLogger(__name__)
LOADED_BACKEND_STATE = "loaded"
IMPORTED_BACKEND_STATE = "imported"
ACTIVE_BACKEND_STATE = "active"
DISABLED_BACKEND_STATE = "disabled"
FAILED_MANIFEST_STATE = "failed_manifest"
FAILED_IMPORT_STATE = "failed_import"
FAILED_ACTIVATION_STATE = "failed_activation"


@dataclass
class BackendStatus:
    """Runtime status for one backend."""

    name: str
    enabled: bool
    module: str = ""
    backend_class: str = ""
    state: str = "pending"
    message: str = ""
    active: bool = False


class BackendManager:
    """Load the backend roster and manage backend lifecycle."""

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        hook_registry: Optional[HookRegistry] = None,
        config_dir: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.hook_registry = hook_registry or HookRegistry()
        self.config_dir = (config_dir or _get_config_dir()).expanduser()

        self._manifests: Dict[str, BackendManifest] = {}
        self._backends: Dict[str, LookupBackend] = {}
        self._statuses: Dict[str, BackendStatus] = {}
        self._activation_order: List[str] = []

    def load_roster(self) -> List[BackendManifest]:
        """Read ``[backend.<name>]`` tables from the loaded configuration."""
        backend_table = self.config.get("backend", {})
        if not isinstance(backend_table, dict):
            logger.warning("backends.toml entry [backend] must be a table")
            return []

        self._manifests = {}
        self._backends = {}
        self._statuses = {}
        self._activation_order = []

        for backend_name in sorted(backend_table.keys()):
            name = str(backend_name or "").strip()
            if not name:
                continue

            build_result = build_manifest_entry(name, backend_table.get(backend_name))
            for warning in build_result.warnings:
                logger.warning(warning)

            if build_result.manifest is None:
                message = build_result.error or "invalid manifest entry"
                self._statuses[name] = BackendStatus(
                    name=name,
                    enabled=False,
                    state=FAILED_MANIFEST_STATE,
                    message=message,
                )
                logger.error("Backend '%s' manifest invalid: %s", name, message)
                continue

            manifest = build_result.manifest
            self._manifests[name] = manifest
            self._statuses[name] = BackendStatus(
                name=name,
                enabled=manifest.enabled,
                module=manifest.module,
                backend_class=manifest.backend_class,
                state=(
                    LOADED_BACKEND_STATE if manifest.enabled else DISABLED_BACKEND_STATE
                ),
                message="" if manifest.enabled else "backend is disabled",
            )

        return [self._manifests[name] for name in sorted(self._manifests)]

    def discover_and_import(self) -> None:
        """Import backend classes and instantiate them."""
        for name in sorted(self._manifests):
            manifest = self._manifests[name]
            if not manifest.enabled:
                continue
            try:
                backend = self._instantiate(manifest)
            except BackendImportError as exc:
                self._set_status(name, state=FAILED_IMPORT_STATE, message=str(exc))
                logger.exception(
                    "Backend '%s' import failed module=%s class=%s",
                    name,
                    manifest.module,
                    manifest.backend_class,
                )
                continue
            self._backends[name] = backend
            self._set_status(name, state=IMPORTED_BACKEND_STATE, message="")

    def activate_all(self) -> None:
        """Activate imported backends, then freeze hook registration."""
        self._activation_order = []
        for name in sorted(self._backends):
            backend = self._backends[name]
            context = BackendContext(
                backend_name=name,
                config_dir=self.config_dir,
                config=self.config,
                hook_registry=self.hook_registry,
                logger=logger.getChild(name),
            )
            try:
                backend.activate(context)
            except Exception as exc:
                self._set_status(
                    name, state=FAILED_ACTIVATION_STATE, message=str(exc)
                )
                logger.exception("Backend '%s' activation failed", name)
                continue
            self._activation_order.append(name)
            self._set_status(name, state=ACTIVE_BACKEND_STATE, message="", active=True)

        self.hook_registry.freeze()

    def register_into(self, dispatcher: Any) -> List[str]:
        """Register active backends with ``dispatcher`` under their roster names."""
        registered = []
        for name in self._activation_order:
            backend = self._backends[name]
            if backend.name != name:
                logger.warning(
                    "Backend roster name '%s' differs from class name '%s'",
                    name,
                    backend.name,
                )
            try:
                dispatcher.register(backend)
            except BackendRegistrationError as exc:
                self._set_status(
                    name, state=FAILED_ACTIVATION_STATE, message=str(exc), active=False
                )
                logger.error("Backend '%s' registration failed: %s", name, exc)
                continue
            registered.append(backend.name)
        return registered

    def list_status(self) -> List[BackendStatus]:
        """Return backend statuses sorted by name."""
        return [self._statuses[name] for name in sorted(self._statuses)]

    def get_backend(self, name: str) -> Optional[LookupBackend]:
        return self._backends.get(name)

    def _instantiate(self, manifest: BackendManifest) -> LookupBackend:
        try:
            module = importlib.import_module(manifest.module)
            backend_class = getattr(module, manifest.backend_class)
            backend = backend_class()
        except Exception as exc:
            raise BackendImportError(str(exc)) from exc
        if not isinstance(backend, LookupBackend):
            raise BackendImportError(
                f"{manifest.module}.{manifest.backend_class} is not a LookupBackend"
            )
        return backend

    def _set_status(
        self,
        name: str,
        *,
        state: str,
        message: str,
        active: Optional[bool] = None,
    ) -> None:
        status = self._statuses.get(name)
        if status is None:
            status = BackendStatus(name=name, enabled=True)
            self._statuses[name] = status

        status.state = state
        status.message = message
        if active is not None:
            status.active = active
