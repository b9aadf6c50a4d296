from __future__ import annotations

import hashlib
import importlib
import importlib.util
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from shapewrap.core.config import get_settings
from shapewrap.core.errors import CapabilityError, UnknownWrapperError
from shapewrap.core.observability.metrics import inc_capability_error

from .models import Wrapper

_log = logging.getLogger("shapewrap.capabilities")

# shapewrap/core/capabilities/registry.py -> parents[2] = shapewrap package
_PACKAGE_ROOT = Path(__file__).resolve().parents[2]
BUILTIN_WRAPPERS_DIR = _PACKAGE_ROOT / "plugins" / "wrappers"


@contextmanager
def reporting(operation: str) -> Iterator[None]:
    """Count and log capability failures, then let them propagate."""
    try:
        yield
    except CapabilityError as exc:
        inc_capability_error(exc.code)
        _log.warning("%s failed: %s", operation, exc.message)
        raise


@dataclass(frozen=True)
class WrapperInfo:
    name: str
    version: str
    sequence_policy: str
    source: str


class WrapperRegistry:
    """
    Wrapper capability registry.

    Discovers plugins from one or more directories:
      <dir>/*.py

    Each plugin module must expose:
      WRAPPER = <shapewrap Wrapper instance>

    Files starting with "_" are skipped. A bad plugin is skipped with a
    warning; a duplicate name is an error.
    """

    def __init__(self, plugin_dirs: Optional[List[Union[str, Path]]] = None):
        self._plugin_dirs = [Path(d) for d in (plugin_dirs or [])]
        self._wrappers: Dict[str, Wrapper] = {}
        self._sources: Dict[str, str] = {}
        self._fingerprint: Optional[str] = None
        self.warnings: List[Dict[str, Any]] = []

    @property
    def fingerprint(self) -> str:
        if self._fingerprint is None:
            self._fingerprint = self._compute_fingerprint()
        return self._fingerprint

    def reload(self) -> None:
        self._wrappers.clear()
        self._sources.clear()
        self.warnings.clear()
        self._fingerprint = None
        self.load_all()

    def load_all(self) -> None:
        for d in self._plugin_dirs:
            if not d.exists():
                self._warn("wrappers.dir_missing", f"No wrapper plugin directory at {d}", path=str(d))
                continue
            for py in sorted(d.glob("*.py")):
                if py.name.startswith("_"):
                    continue
                try:
                    wrapper = self._load_plugin_from_file(py)
                except Exception as e:
                    self._warn("wrappers.load_failed", f"Failed to load wrapper plugin {py.name}: {e}", module_path=str(py))
                    continue
                self.register(wrapper, source=str(py))

    def register(self, wrapper: Wrapper, *, source: str = "<runtime>") -> Wrapper:
        if not isinstance(wrapper, Wrapper):
            raise TypeError(f"expected Wrapper, got {type(wrapper).__name__}")
        if wrapper.name in self._wrappers:
            raise ValueError(f"Duplicate wrapper name: {wrapper.name} ({source})")
        self._wrappers[wrapper.name] = wrapper
        self._sources[wrapper.name] = source
        self._fingerprint = None
        _log.debug("registered wrapper %s from %s", wrapper.name, source)
        return wrapper

    def list_wrappers(self) -> List[WrapperInfo]:
        return [
            WrapperInfo(
                name=n,
                version=self._wrappers[n].version,
                sequence_policy=self._wrappers[n].sequence_policy.value,
                source=self._sources[n],
            )
            for n in sorted(self._wrappers.keys())
        ]

    def names(self) -> List[str]:
        return sorted(self._wrappers.keys())

    def get(self, name: str) -> Optional[Wrapper]:
        return self._wrappers.get(name)

    def require(self, name: str) -> Wrapper:
        wrapper = self._wrappers.get(name)
        if wrapper is None:
            with reporting("wrapper lookup"):
                raise UnknownWrapperError(name, self._wrappers.keys())
        return wrapper

    # --- internals ---

    def _warn(self, code: str, message: str, **data: Any) -> None:
        self.warnings.append({"code": code, "severity": "warn", "message": message, "data": data})
        _log.warning(message)

    def _compute_fingerprint(self) -> str:
        """
        Stable fingerprint of the registered wrapper set.

        Uses names, versions and policies only, so it is deterministic across
        restarts and machines.
        """
        h = hashlib.sha256()
        for name in sorted(self._wrappers.keys()):
            w = self._wrappers[name]
            h.update(f"{w.name}:{w.version}:{w.sequence_policy.value}".encode("utf-8"))
            h.update(b"\0")
        return h.hexdigest()[:16]

    def _load_module(self, file_path: Path):
        file_path = file_path.resolve()

        # Built-in plugins import under their package name so their value
        # classes are the same objects callers import directly.
        if file_path.parent == BUILTIN_WRAPPERS_DIR.resolve():
            return importlib.import_module(f"shapewrap.plugins.wrappers.{file_path.stem}")

        # module name must be deterministic across interpreter restarts
        path_key = str(file_path).replace("\\", "/").lower().encode("utf-8")
        path_hash = hashlib.sha1(path_key).hexdigest()[:16]
        module_name = f"shapewrap_wrapper_{file_path.stem}_{path_hash}"

        spec = importlib.util.spec_from_file_location(module_name, str(file_path))
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot create module spec for {file_path}")

        module = importlib.util.module_from_spec(spec)

        # register BEFORE exec_module (dataclasses needs this)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)  # type: ignore[attr-defined]
        except Exception:
            sys.modules.pop(module_name, None)
            raise
        return module

    def _load_plugin_from_file(self, file_path: Path) -> Wrapper:
        module = self._load_module(file_path)
        wrapper = getattr(module, "WRAPPER", None)
        if wrapper is None:
            raise AttributeError(f"{file_path.name} must define WRAPPER")
        if not isinstance(wrapper, Wrapper):
            raise TypeError(f"{file_path.name}: WRAPPER must be a Wrapper, got {type(wrapper).__name__}")
        return wrapper


_REGISTRY: Optional[WrapperRegistry] = None
_REGISTRY_LOCK = threading.Lock()


def get_wrapper_registry() -> WrapperRegistry:
    global _REGISTRY
    with _REGISTRY_LOCK:
        if _REGISTRY is None:
            dirs: List[Path] = [BUILTIN_WRAPPERS_DIR]
            extra = get_settings().plugins_dir
            if extra:
                dirs.append(Path(extra))
            reg = WrapperRegistry(dirs)
            reg.load_all()
            _REGISTRY = reg
        return _REGISTRY


def reset_wrapper_registry() -> None:
    global _REGISTRY
    with _REGISTRY_LOCK:
        _REGISTRY = None


def resolve_wrapper(wrapper: Union[Wrapper, str]) -> Wrapper:
    if isinstance(wrapper, Wrapper):
        return wrapper
    if isinstance(wrapper, str):
        return get_wrapper_registry().require(wrapper)
    raise TypeError(f"expected Wrapper or wrapper name, got {type(wrapper).__name__}")
