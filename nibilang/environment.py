"""Scoped name-to-cell storage with parent lookup."""

from __future__ import annotations

from typing import Any


class Environment:
    """A scope mapping names to cells, falling back to a parent scope."""

    def __init__(self, parent: Environment | None = None) -> None:
        self.parent = parent
        self.cells: dict[str, Any] = {}
        self._loaded_modules: set[str] = set()

    def _owner(self, name: str) -> Environment | None:
        env: Environment | None = self
        while env is not None:
            if name in env.cells:
                return env
            env = env.parent
        return None

    def get_env(self, name: str) -> Environment | None:
        """Return the scope that defines ``name``, or None."""
        return self._owner(name)

    def get(self, name: str) -> Any:
        """Return the cell bound to ``name`` here or in a parent, or None."""
        owner = self._owner(name)
        return None if owner is None else owner.cells[name]

    def set(self, name: str, cell: Any) -> None:
        """Rebind ``name`` where it is defined, else define it here."""
        owner = self._owner(name)
        (owner if owner is not None else self).cells[name] = cell

    def drop(self, name: str) -> bool:
        """Remove ``name`` from the nearest scope defining it."""
        owner = self._owner(name)
        if owner is None:
            return False
        del owner.cells[name]
        return True

    def indicate_loaded_module(self, module_name: str) -> None:
        """Record that a module has been loaded into this scope."""
        self._loaded_modules.add(module_name)

    def is_module_loaded(self, module_name: str) -> bool:
        """True if the module was loaded here or in a parent scope."""
        env: Environment | None = self
        while env is not None:
            if module_name in env._loaded_modules:
                return True
            env = env.parent
        return False

    def copy(self) -> Environment:
        """Return a new scope with the same bindings, modules and parent."""
        duplicate = Environment(self.parent)
        duplicate.cells = dict(self.cells)
        duplicate._loaded_modules = set(self._loaded_modules)
        return duplicate