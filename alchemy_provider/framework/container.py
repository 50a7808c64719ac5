"""Service container.

Services are registered under an *abstract* key (a class or a string) and
built on demand. Classes are autowired from their constructor annotations,
callables receive the container itself.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from alchemy_provider.exceptions import BindingResolutionError

logger = logging.getLogger("alchemy-provider")

Extender = Callable[[Any, "Container"], Any]


@dataclass
class Binding:
    """A registered concrete and whether its result is shared."""

    concrete: Any
    shared: bool = False


def _describe(abstract: Any) -> str:
    if isinstance(abstract, type):
        return f"{abstract.__module__}.{abstract.__qualname__}"
    return str(abstract)


class Container:
    """Resolve services from bindings, shared instances and aliases."""

    def __init__(self):
        self._bindings: dict[Any, Binding] = {}
        self._instances: dict[Any, Any] = {}
        self._aliases: dict[Any, Any] = {}
        self._extenders: dict[Any, list[Extender]] = {}
        self._resolved: set[Any] = set()
        # keys being resolved, outermost first
        self._building: list[Any] = []
        self._lock = threading.RLock()

    def bind(self, abstract: Any, concrete: Any = None, shared: bool = False) -> None:
        """Register a binding.

        Args:
            abstract: Key the service is requested with.
            concrete: Class to autowire, callable taking the container, or another key to resolve.
                Defaults to ``abstract`` itself.
            shared: Build once and reuse the result.
        """
        with self._lock:
            self._instances.pop(abstract, None)
            self._aliases.pop(abstract, None)
            self._bindings[abstract] = Binding(abstract if concrete is None else concrete, shared)

    def singleton(self, abstract: Any, concrete: Any = None) -> None:
        """Register a shared binding."""
        self.bind(abstract, concrete, shared=True)

    def instance(self, abstract: Any, obj: Any) -> Any:
        """Register an already built object as a shared instance."""
        with self._lock:
            self._aliases.pop(abstract, None)
            self._instances[abstract] = obj
        return obj

    def alias(self, abstract: Any, alias: Any) -> None:
        """Make ``alias`` resolve to whatever ``abstract`` resolves to."""
        if alias == abstract:
            raise BindingResolutionError(_describe(abstract), "a service cannot be aliased to itself")
        self._aliases[alias] = abstract

    def get_alias(self, abstract: Any) -> Any:
        seen = set()
        while abstract in self._aliases:
            if abstract in seen:
                raise BindingResolutionError(_describe(abstract), "alias chain is circular")
            seen.add(abstract)
            abstract = self._aliases[abstract]
        return abstract

    def bound(self, abstract: Any) -> bool:
        return abstract in self._bindings or abstract in self._instances or abstract in self._aliases

    def __contains__(self, abstract: Any) -> bool:
        return self.bound(abstract)

    def resolved(self, abstract: Any) -> bool:
        abstract = self.get_alias(abstract)
        return abstract in self._resolved or abstract in self._instances

    def forget_instance(self, abstract: Any) -> None:
        self._instances.pop(self.get_alias(abstract), None)

    def extend(self, abstract: Any, closure: Extender) -> None:
        """Decorate a service after it is built.

        If the service is already shared and built, the closure replaces the
        stored instance right away.
        """
        abstract = self.get_alias(abstract)
        with self._lock:
            if abstract in self._instances:
                self._instances[abstract] = closure(self._instances[abstract], self)
            else:
                self._extenders.setdefault(abstract, []).append(closure)

    def make(self, abstract: Any) -> Any:
        """Resolve a service.

        Raises:
            BindingResolutionError: When nothing is bound and the key cannot be autowired.
        """
        abstract = self.get_alias(abstract)
        with self._lock:
            if abstract in self._instances:
                return self._instances[abstract]
            if abstract in self._building:
                chain = " -> ".join(_describe(item) for item in [*self._building, abstract])
                raise BindingResolutionError(_describe(abstract), f"circular dependency ({chain})")

            binding = self._bindings.get(abstract)
            concrete = binding.concrete if binding is not None else abstract
            self._building.append(abstract)
            try:
                obj = self._build_concrete(abstract, concrete)
            finally:
                self._building.pop()

            for extender in self._extenders.get(abstract, []):
                obj = extender(obj, self)

            if binding is not None and binding.shared:
                self._instances[abstract] = obj
            self._resolved.add(abstract)
            logger.debug(f"Resolved service '{_describe(abstract)}'")
            return obj

    def __getitem__(self, abstract: Any) -> Any:
        return self.make(abstract)

    def build(self, cls: type) -> Any:
        """Instantiate ``cls``, resolving annotated constructor parameters from the container."""
        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise BindingResolutionError(_describe(cls), "target is not instantiable")
        return cls(**self._resolve_dependencies(cls))

    def _build_concrete(self, abstract: Any, concrete: Any) -> Any:
        # a class concrete is always autowired, other keys resolve their own binding
        if inspect.isclass(concrete):
            return self.build(concrete)
        if concrete is not abstract and (isinstance(concrete, str) or self._is_bound_annotation(concrete)):
            return self.make(concrete)
        if isinstance(concrete, str):
            raise BindingResolutionError(concrete, "nothing is bound to this key")
        if callable(concrete):
            return concrete(self)
        raise BindingResolutionError(_describe(abstract), f"concrete {concrete!r} is not buildable")

    def _resolve_dependencies(self, cls: type) -> dict[str, Any]:
        try:
            signature = inspect.signature(cls, eval_str=True)
        except (NameError, TypeError, ValueError) as e:
            raise BindingResolutionError(_describe(cls), f"cannot inspect constructor ({e})") from e

        kwargs = {}
        for name, param in signature.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = param.annotation
            if annotation is not param.empty and self._is_bound_annotation(annotation):
                kwargs[name] = self.make(annotation)
            elif param.default is not param.empty:
                continue
            elif inspect.isclass(annotation) and annotation.__module__ != "builtins":
                kwargs[name] = self.make(annotation)
            else:
                raise BindingResolutionError(_describe(cls), f"unresolvable parameter '{name}'")
        return kwargs

    def _is_bound_annotation(self, annotation: Any) -> bool:
        try:
            return self.bound(annotation)
        except TypeError:
            # unhashable annotations such as typing generics
            return False
