from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator

from .models import Severity, ValidationIssue
from .spec_store import SpecStore


def find_feature_cycles(store: SpecStore) -> list[list[str]]:
    """Return the strongly connected groups of features that form cycles.

    Edges to unknown names are ignored. A feature depending on itself counts
    as a cycle of one. Groups and their members are sorted by name.
    """
    features = store.features
    index_of: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    cycles: list[list[str]] = []

    def enter(name: str) -> tuple[str, Iterator[str]]:
        index_of[name] = lowlink[name] = len(index_of)
        stack.append(name)
        on_stack.add(name)
        return name, iter(features[name].dependencies)

    # Explicit work stack of (feature, remaining edges) so deep chains do
    # not hit the recursion limit.
    for root in sorted(features):
        if root in index_of:
            continue
        work = [enter(root)]
        while work:
            name, edges = work[-1]
            advanced = False
            for dep in edges:
                if dep not in features:
                    continue
                if dep not in index_of:
                    work.append(enter(dep))
                    advanced = True
                    break
                if dep in on_stack:
                    lowlink[name] = min(lowlink[name], index_of[dep])
            if advanced:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[name])
            if lowlink[name] != index_of[name]:
                continue
            component: list[str] = []
            while True:
                member = stack.pop()
                on_stack.discard(member)
                component.append(member)
                if member == name:
                    break
            if len(component) > 1 or name in features[name].dependencies:
                cycles.append(sorted(component))
    return sorted(cycles)


def find_target_name_collisions(store: SpecStore) -> dict[str, list[str]]:
    """Map each derived target name claimed by more than one app to those apps."""
    owners: dict[str, list[str]] = defaultdict(list)
    for app in store.apps.values():
        for target_name in app.target_names:
            if app.name not in owners[target_name]:
                owners[target_name].append(app.name)
    return {name: apps for name, apps in sorted(owners.items()) if len(apps) > 1}


def validate_workspace(store: SpecStore) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for app in store.apps.values():
        for dep in app.dependencies:
            if store.lookup_feature(dep) is None:
                issues.append(
                    ValidationIssue(Severity.WARNING, f"apps.{app.name}", f"depends on unknown feature {dep}")
                )
    for feature in store.features.values():
        for dep in feature.dependencies:
            if store.lookup_feature(dep) is None:
                issues.append(
                    ValidationIssue(Severity.WARNING, f"features.{feature.name}", f"depends on unknown feature {dep}")
                )

    for cycle in find_feature_cycles(store):
        issues.append(
            ValidationIssue(
                Severity.WARNING,
                f"features.{cycle[0]}",
                f"Feature dependency cycle: {' -> '.join(cycle)}",
            )
        )

    for target_name, apps in find_target_name_collisions(store).items():
        issues.append(
            ValidationIssue(
                Severity.ERROR,
                f"apps.{apps[0]}",
                f"Target name {target_name} is derived by several apps: {', '.join(apps)}",
            )
        )
    return issues
