"""
Module Registry and Loader.

The registry keeps the feature modules by name and drives their lifecycle:
a module registered before the context is known is activated as soon as
set_context() is called. A module whose on_entry() fails stays registered
and reports status "error" instead of taking the server down.
"""
import importlib
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type

from core.app_context import AppContext
from core.interface import IAppModule

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Process-wide registry of IAppModule instances, in registration order."""

    _instance: Optional["ModuleRegistry"] = None

    def __new__(cls) -> "ModuleRegistry":
        """Singleton pattern to ensure single registry instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._modules: Dict[str, IAppModule] = {}
        self._active: set[str] = set()
        self._errors: Dict[str, str] = {}
        self._context: Optional[AppContext] = None
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (used by tests)."""
        cls._instance = None

    def set_context(self, context: AppContext) -> None:
        """Set the context and activate every module still waiting for it."""
        self._context = context
        for name in list(self._modules):
            if name not in self._active and name not in self._errors:
                self._activate(name)

    def _activate(self, name: str) -> None:
        module = self._modules[name]
        try:
            module.on_entry(self._context)
        except Exception as e:
            self._errors[name] = str(e)
            logger.exception(f"Module '{name}' failed to initialize")
            self._context.log_event(f"Module '{name}' init failed: {e}", "ERROR")
            return
        self._active.add(name)
        self._context.log_event(f"Module '{name}' initialized", "SUCCESS")

    def register(self, module: IAppModule) -> bool:
        """
        Add a module; activates it right away if the context is set.

        Returns:
            False if a module with the same name is already registered.
        """
        name = module.get_module_name()
        if name in self._modules:
            logger.warning(f"Module '{name}' already registered. Skipping.")
            return False

        self._modules[name] = module
        logger.info(f"Module '{name}' registered")

        if self._context is not None:
            self._activate(name)
        return True

    def register_class(self, module_class: Type[IAppModule]) -> bool:
        """Instantiate and register a module class."""
        return self.register(module_class())

    def unregister(self, module_name: str) -> bool:
        """
        Shut a module down and remove it.

        Returns:
            False if no such module is registered.
        """
        module = self._modules.pop(module_name, None)
        if module is None:
            logger.warning(f"Module '{module_name}' not found in registry.")
            return False

        if module_name in self._active:
            try:
                module.on_shutdown()
            except Exception as e:
                logger.error(f"Error during module '{module_name}' shutdown: {e}")

        self._active.discard(module_name)
        self._errors.pop(module_name, None)
        logger.info(f"Module '{module_name}' unregistered")
        return True

    def get_module(self, module_name: str) -> Optional[IAppModule]:
        return self._modules.get(module_name)

    def get_all_modules(self) -> List[IAppModule]:
        """Active modules only; failed or pending ones mount no routes."""
        return [module for name, module in self._modules.items() if name in self._active]

    def get_module_names(self) -> List[str]:
        return list(self._modules)

    def is_active(self, module_name: str) -> bool:
        return module_name in self._active

    def get_statuses(self) -> Dict[str, dict]:
        """Status report per module name."""
        statuses = {}
        for name, module in self._modules.items():
            if name in self._errors:
                statuses[name] = {"status": "error", "details": {"Error": self._errors[name]}}
            elif name not in self._active:
                statuses[name] = {"status": "initializing", "details": {}}
            else:
                statuses[name] = module.get_status()
        return statuses

    def shutdown_all(self) -> None:
        """Unregister every module, newest first."""
        for name in reversed(list(self._modules)):
            self.unregister(name)
        logger.info("All modules shut down.")


class ModuleLoader:
    """
    Discovers package modules (modules/<name>/__init__.py).

    A package exporting ``create_module()`` is instantiated through that
    factory; otherwise every IAppModule subclass it exports is registered.
    Import errors propagate, a broken module stops startup.
    """

    def __init__(self, registry: ModuleRegistry, package: str = "modules") -> None:
        self._registry = registry
        self._package = package

    def _factories(self, package: object) -> List[Callable[[], IAppModule]]:
        factory = getattr(package, "create_module", None)
        if callable(factory):
            return [factory]
        return [
            attr
            for attr in vars(package).values()
            if isinstance(attr, type) and issubclass(attr, IAppModule) and attr is not IAppModule
        ]

    def load_from_directory(self, modules_path: str) -> int:
        """
        Import and register every package module in a directory.

        Returns:
            Number of modules registered.
        """
        path = Path(modules_path)
        if not path.is_dir():
            logger.warning(f"Modules directory '{modules_path}' does not exist.")
            return 0

        loaded = 0
        for subdir in sorted(path.iterdir()):
            if subdir.name.startswith("_") or not (subdir / "__init__.py").exists():
                continue

            package = importlib.import_module(f"{self._package}.{subdir.name}")
            for factory in self._factories(package):
                if self._registry.register(factory()):
                    loaded += 1
                    logger.info(f"Loaded package module: {subdir.name}")

        return loaded
