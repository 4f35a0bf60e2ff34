"""
Benchmark module discovery and the module contract.

A benchmark module is any Python module (or object) exposing:

    init() -> Mapping                    establishes the module's configuration
    get_iterations(config) -> int        iteration count from that configuration
    setup(config) -> fixture             optional, builds the input fixture
    run(config, fixture) -> str | None   the measured unit

Configuration is never kept in module globals: whatever ``init`` returns is
wrapped in a ``ModuleConfig`` and handed explicitly to the other entry
points.
"""

import importlib
import importlib.util
import itertools
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from .errors import ConfigurationError, LoadError, SetupError

logger = logging.getLogger(__name__)

REQUIRED_ENTRY_POINTS = ("init", "get_iterations", "run")
OPTIONAL_ENTRY_POINTS = ("setup",)

Source = Union[str, Path, ModuleType, Any]

_file_counter = itertools.count(1)


class ModuleConfig(Mapping):
    """Read-only configuration produced by a module's ``init``."""

    def __init__(self, module_name: str, params: Optional[Mapping] = None):
        self.module_name = module_name
        self._params = dict(params or {})

    def __getitem__(self, key: str) -> Any:
        return self._params[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"ModuleConfig({self.module_name!r}, {self._params!r})"

    def require(self, key: str) -> Any:
        """Return ``key`` or raise ConfigurationError if init did not set it."""
        if key not in self._params:
            raise ConfigurationError(
                f"{self.module_name}: required parameter '{key}' was not set by init()"
            )
        return self._params[key]

    def with_overrides(self, overrides: Optional[Mapping]) -> "ModuleConfig":
        """Return a copy with ``overrides`` applied on top."""
        if not overrides:
            return self
        params = dict(self._params)
        params.update(overrides)
        return ModuleConfig(self.module_name, params)

    def to_dict(self) -> dict:
        return dict(self._params)


def _noop_setup(config: ModuleConfig) -> None:
    return None


class BenchmarkModule:
    """One loaded benchmark, plus the state its lifecycle builds up.

    Owned by the runner while it executes; ``release`` drops the
    configuration and fixture once the module is done.
    """

    def __init__(
        self,
        name: str,
        source: str,
        entry_points: dict[str, Callable],
    ):
        self.name = name
        self.source = source
        self._entry_points = entry_points
        self.config: Optional[ModuleConfig] = None
        self.fixture: Any = None

    @property
    def has_setup(self) -> bool:
        return self._entry_points["setup"] is not _noop_setup

    def init(self, overrides: Optional[Mapping] = None) -> ModuleConfig:
        """Call the module's init() and keep the resulting configuration."""
        try:
            params = self._entry_points["init"]()
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"init() failed: {e}") from e

        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(
                f"init() must return a mapping, got {type(params).__name__}"
            )

        self.config = ModuleConfig(self.name, params).with_overrides(overrides)
        return self.config

    def iterations(self) -> int:
        """Call get_iterations() with the configuration from init()."""
        if self.config is None:
            raise ConfigurationError("get_iterations() called before init()")

        try:
            value = self._entry_points["get_iterations"](self.config)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"get_iterations() failed: {e}") from e

        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                f"get_iterations() must return an int, got {type(value).__name__}"
            )
        if value < 1:
            raise ConfigurationError(f"get_iterations() returned {value}, expected >= 1")
        return value

    def setup(self) -> Any:
        """Build the fixture."""
        if self.config is None:
            raise ConfigurationError("setup() called before init()")
        try:
            self.fixture = self._entry_points["setup"](self.config)
        except Exception as e:
            raise SetupError(f"setup() failed: {e}") from e
        return self.fixture

    def run(self) -> Optional[str]:
        """Invoke the measured unit once. Exceptions propagate unchanged."""
        label = self._entry_points["run"](self.config, self.fixture)
        if label is None:
            return None
        return str(label)

    def release(self) -> None:
        """Drop module-local state."""
        self.config = None
        self.fixture = None

    def __repr__(self) -> str:
        return f"BenchmarkModule(name={self.name!r}, source={self.source!r})"


def _source_identity(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "__name__", None) or type(source).__name__


def _derive_name(source: Source, target: Any) -> str:
    if isinstance(source, Path) or (isinstance(source, str) and source.endswith(".py")):
        return Path(source).stem
    if isinstance(source, str):
        return source.rsplit(".", 1)[-1]
    if isinstance(target, ModuleType):
        return target.__name__.rsplit(".", 1)[-1]
    # Benchmark objects that are not modules may carry their own name.
    explicit = getattr(target, "name", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    return getattr(target, "__name__", None) or type(target).__name__


def _import_file(path: Path) -> ModuleType:
    if not path.is_file():
        raise FileNotFoundError(f"no such file: {path}")
    module_name = f"_microbench_{path.stem}_{next(_file_counter)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _resolve(source: Source) -> Any:
    if isinstance(source, Path):
        return _import_file(source)
    if isinstance(source, str):
        if source.endswith(".py") or Path(source).is_file():
            return _import_file(Path(source))
        return importlib.import_module(source)
    return source


def load_source(source: Source, strict: bool = False) -> BenchmarkModule:
    """Resolve one source and validate its entry points.

    Raises:
        LoadError: if the source cannot be imported or an entry point is
            missing. With ``strict`` the ``setup`` entry point is required.
    """
    identity = _source_identity(source)

    try:
        target = _resolve(source)
    except (Exception, SystemExit) as e:
        raise LoadError(identity, f"cannot load {identity}: {e!r}") from e

    required = REQUIRED_ENTRY_POINTS + (OPTIONAL_ENTRY_POINTS if strict else ())
    missing = [
        name for name in required
        if not callable(getattr(target, name, None))
    ]
    if missing:
        raise LoadError(
            identity,
            f"{identity} is missing entry point(s): {', '.join(missing)}",
            missing=missing,
        )

    entry_points = {name: getattr(target, name) for name in REQUIRED_ENTRY_POINTS}
    setup = getattr(target, "setup", None)
    entry_points["setup"] = setup if callable(setup) else _noop_setup

    return BenchmarkModule(
        name=_derive_name(source, target),
        source=identity,
        entry_points=entry_points,
    )


def discover(
    sources: Iterable[Source],
    strict: bool = False,
) -> tuple[list[BenchmarkModule], list[LoadError]]:
    """Load every source, keeping discovery order.

    A bad source is recorded as a LoadError and skipped; it never stops the
    remaining sources from loading.

    Returns:
        (suite, load_errors)
    """
    suite: list[BenchmarkModule] = []
    errors: list[LoadError] = []

    for source in sources:
        try:
            module = load_source(source, strict=strict)
        except LoadError as e:
            logger.warning("Skipping %s: %s", e.source, e)
            errors.append(e)
            continue
        logger.debug("Loaded %s from %s", module.name, module.source)
        suite.append(module)

    return suite, errors
