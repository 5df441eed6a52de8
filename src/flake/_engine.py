"""Engine facade binding a template directory to shared collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from flake._store import SharedStore, default_store
from flake._view import View
from flake.config import FlakeConfig, load_config
from flake.exceptions import ConfigurationError
from flake.filters import default_registry
from flake.templating import JinjaEvaluator
from flake.utils import create_logger, get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from structlog.typing import FilteringBoundLogger

    from flake.filters import FilterRegistry
    from flake.templating import TemplateEvaluator


class Flake:
    """Creates and renders views from one template directory.

    Every view made by the engine shares its store, evaluator, filter
    registry and logger, so data shared through the engine is visible to all
    of them.

    Example:
        >>> engine = Flake("views")
        >>> engine.share("site", "Example")
        >>> html = engine.render("pages/home", {"title": "Home"})

    Args:
        path: Template directory. Defaults to `config.templates.path`.
        config: Configuration. Defaults to built-in defaults.
        store: Shared data store. Defaults to the process-wide store.
        evaluator: Template evaluator. Defaults to a Jinja2 evaluator built
            from `config.jinja`.
        filters: Filter registry. Defaults to the built-in registry.
        logger: Structured logger. Defaults to the shared Flake logger.

    Raises:
        ConfigurationError: If no template directory is given or configured,
            or it does not exist.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        config: FlakeConfig | None = None,
        store: SharedStore | None = None,
        evaluator: TemplateEvaluator | None = None,
        filters: FilterRegistry | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self.config: FlakeConfig = config if config is not None else FlakeConfig()

        if path is None:
            path = self.config.templates.path
        if not str(path):
            msg = "No template directory configured."
            raise ConfigurationError(msg)
        base = Path(path)
        if not base.is_dir():
            msg = f'The "{path}" directory does not exist.'
            raise ConfigurationError(msg, path=base)

        self.path: Path = base
        self.store: SharedStore = store if store is not None else default_store
        self.evaluator: TemplateEvaluator = (
            evaluator
            if evaluator is not None
            else JinjaEvaluator(self.config.jinja.to_environment_config())
        )
        self.filters: FilterRegistry = (
            filters if filters is not None else default_registry
        )
        self.logger: FilteringBoundLogger = (
            logger if logger is not None else get_logger()
        )

    @classmethod
    def from_config(
        cls,
        config: FlakeConfig,
        *,
        path: str | Path | None = None,
        store: SharedStore | None = None,
    ) -> Flake:
        """Build an engine whose evaluator and logger follow `config`."""
        logger = create_logger(
            config.logging.level.value,
            log_format="json" if config.logging.format == "json" else "text",
            log_file=config.logging.file,
        )
        return cls(path, config=config, store=store, logger=logger)

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        *,
        config_path: Path | None = None,
        store: SharedStore | None = None,
    ) -> Flake:
        """Load configuration from files and the environment, then build an engine.

        Raises:
            FileNotFoundError: If `config_path` does not exist.
            ConfigError: If configuration cannot be loaded or is invalid.
            ConfigurationError: If the template directory does not exist.
        """
        config = load_config(config_path=config_path)
        return cls.from_config(config, path=path, store=store)

    def make(self, name: str, data: Mapping[str, object] | None = None) -> View:
        """Create a view bound to this engine's directory and collaborators."""
        return View(
            name,
            self.path,
            data,
            extension=self.config.templates.extension,
            store=self.store,
            evaluator=self.evaluator,
            filters=self.filters,
            max_layout_depth=self.config.templates.max_layout_depth,
            logger=self.logger,
        )

    def render(
        self,
        name: str,
        data: Mapping[str, object] | None = None,
        callback: Callable[[View, str], object] | None = None,
    ) -> object:
        return self.make(name, data).render(callback)

    def share(self, key: str | Mapping[str, object], value: object = None) -> object:
        return self.store.share(key, value)

    def find(self, name: str) -> Path:
        """Return the template file for a view name.

        Raises:
            ViewNotFoundError: If no template file exists for the name.
        """
        return self.make(name).find(name)

    def exists(self, name: str) -> bool:
        return self.make(name).exists(name)
