"""Dependency resolution over the feature graph.

A root (app or feature) links only its *direct* features as internal modules;
every feature reachable below them contributes its external packages but is
never linked itself, since a feature hides its own sub-feature linkage.

Names that do not resolve to a feature are dropped from the graph instead of
failing the resolution. They are logged and collected on the result so
callers can surface them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .models import AppSpec, ComponentSpec, Dependency, FeatureSpec
from .spec_store import SpecStore

logger = logging.getLogger(__name__)

DependencyResolverFn = Callable[[AppSpec], list[Dependency]]


@dataclass(frozen=True)
class UnresolvedDependency:
    referrer: str
    name: str


@dataclass(frozen=True)
class ResolvedDependencies:
    root: str
    internal_modules: tuple[str, ...]
    external_packages: frozenset[str]
    unresolved: tuple[UnresolvedDependency, ...] = ()

    def to_dependencies(self) -> list[Dependency]:
        """Return internal modules in declared order, then external packages sorted by identifier."""
        dependencies = [Dependency.internal_module(name) for name in self.internal_modules]
        dependencies.extend(Dependency.external_package(ref) for ref in sorted(self.external_packages))
        return dependencies


class DependencyResolver:
    """Computes the dependency list of an app or feature from a ``SpecStore``.

    Instances keep no per-call state, so one resolver may serve several apps
    concurrently. Calling the instance with an ``AppSpec`` satisfies
    ``DependencyResolverFn``.
    """

    def __init__(self, store: SpecStore) -> None:
        self.store = store

    def external_closure(
        self,
        feature: FeatureSpec,
        visited: set[str] | None = None,
        unresolved: list[UnresolvedDependency] | None = None,
    ) -> set[str]:
        """Union of external packages declared by ``feature`` and everything below it.

        ``visited`` is keyed by feature name; a feature already in it
        contributes nothing, which collapses diamonds and ends cycles. The
        walk keeps its own stack so deep chains do not hit the recursion limit.
        """
        visited = set() if visited is None else visited
        result: set[str] = set()
        stack = [feature]
        while stack:
            current = stack.pop()
            if current.name in visited:
                continue
            visited.add(current.name)
            result |= current.external_dependencies

            children: list[FeatureSpec] = []
            for child_name in current.dependencies:
                child = self.store.lookup_feature(child_name)
                if child is None:
                    _record_unresolved(unresolved, current.name, child_name)
                    continue
                children.append(child)
            # Reversed so children are visited in declared order.
            stack.extend(reversed(children))
        return result

    def resolve(self, root: ComponentSpec) -> ResolvedDependencies:
        visited: set[str] = set()
        if isinstance(root, FeatureSpec):
            visited.add(root.name)
        unresolved: list[UnresolvedDependency] = []

        internal_modules: list[str] = []
        external_packages = set(root.external_dependencies)
        for name in root.dependencies:
            feature = self.store.lookup_feature(name)
            if feature is None:
                _record_unresolved(unresolved, root.name, name)
                continue
            if name not in internal_modules:
                internal_modules.append(name)
            external_packages |= self.external_closure(feature, visited, unresolved)

        for item in unresolved:
            logger.warning("Dropping unknown feature %r referenced by %r", item.name, item.referrer)
        logger.debug(
            "Resolved %s: modules=%s packages=%s",
            root.name,
            internal_modules,
            sorted(external_packages),
        )
        return ResolvedDependencies(
            root=root.name,
            internal_modules=tuple(internal_modules),
            external_packages=frozenset(external_packages),
            unresolved=tuple(unresolved),
        )

    def __call__(self, app: AppSpec) -> list[Dependency]:
        return self.resolve(app).to_dependencies()


def _record_unresolved(unresolved: list[UnresolvedDependency] | None, referrer: str, name: str) -> None:
    if unresolved is None:
        return
    item = UnresolvedDependency(referrer=referrer, name=name)
    if item not in unresolved:
        unresolved.append(item)
