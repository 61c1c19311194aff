from __future__ import annotations

import itertools

import pytest

from xcproj_factory import AppSpec, Dependency, DependencyKind, DependencyResolver, FeatureSpec, SpecStore
from xcproj_factory.resolver import UnresolvedDependency


def _store(*features: FeatureSpec, apps: tuple[AppSpec, ...] = ()) -> SpecStore:
    return SpecStore(
        apps={app.name: app for app in apps},
        features={feature.name: feature for feature in features},
    )


def _feature(name: str, deps: list[str] | None = None, externals: list[str] | None = None) -> FeatureSpec:
    return FeatureSpec(name=name, dependencies=deps, external_dependencies=externals)


def test_feature_spec_accepts_absent_and_camel_case_fields() -> None:
    feature = FeatureSpec.model_validate({"name": "Shared", "dependencies": None, "carthageDependencies": ["Alamofire"]})
    assert feature.dependencies == ()
    assert feature.external_dependencies == frozenset({"Alamofire"})

    app = AppSpec.model_validate({"name": "Foo", "externalDependencies": ["RxSwift"]})
    assert app.external_dependencies == frozenset({"RxSwift"})
    assert app.dependencies == ()


def test_app_spec_derives_target_names() -> None:
    app = AppSpec(name="Foo")
    assert app.target_name == "Foo"
    assert app.unit_test_target_name == "FooTests"
    assert app.ui_test_target_name == "FooUITests"


def test_dependency_variants_carry_link_embed_implicit_flags() -> None:
    module = Dependency.internal_module("Shared")
    package = Dependency.external_package("Alamofire")

    assert (module.kind, module.link, module.embed, module.implicit) == (DependencyKind.FRAMEWORK, True, True, True)
    assert (package.kind, package.link, package.embed, package.implicit) == (DependencyKind.CARTHAGE, True, True, False)
    assert module.reference == "Shared.framework"
    assert package.reference == "Alamofire"
    assert module.identity != Dependency.external_package("Shared").identity


def test_diamond_dependencies_collapse_to_one_entry() -> None:
    store = _store(
        _feature("A", ["B", "C"]),
        _feature("B", ["D"], ["PkgB"]),
        _feature("C", ["D"], ["PkgC"]),
        _feature("D", [], ["PkgD"]),
    )
    result = DependencyResolver(store).resolve(store.features["A"])

    assert result.external_packages == frozenset({"PkgB", "PkgC", "PkgD"})
    dependencies = result.to_dependencies()
    assert [dep.name for dep in dependencies].count("PkgD") == 1
    assert len({dep.identity for dep in dependencies}) == len(dependencies)


def test_only_direct_features_are_linked_as_modules() -> None:
    store = _store(
        _feature("A", ["B"]),
        _feature("B", ["C"]),
        _feature("C", [], ["Charts"]),
    )
    result = DependencyResolver(store).resolve(store.features["A"])

    assert result.internal_modules == ("B",)
    assert "Charts" in result.external_packages
    assert Dependency.internal_module("C") not in result.to_dependencies()


def test_unknown_names_are_dropped_and_collected() -> None:
    with_unknown = _store(
        _feature("A", ["B", "Ghost"]),
        _feature("B", ["Phantom"], ["PkgB"]),
    )
    without_unknown = _store(
        _feature("A", ["B"]),
        _feature("B", [], ["PkgB"]),
    )

    result = DependencyResolver(with_unknown).resolve(with_unknown.features["A"])
    expected = DependencyResolver(without_unknown).resolve(without_unknown.features["A"])

    assert result.internal_modules == expected.internal_modules
    assert result.external_packages == expected.external_packages
    assert set(result.unresolved) == {
        UnresolvedDependency(referrer="A", name="Ghost"),
        UnresolvedDependency(referrer="B", name="Phantom"),
    }


def test_external_closure_is_invariant_under_dependency_order() -> None:
    leaves = [
        _feature("B", ["D"], ["PkgB"]),
        _feature("D", [], ["PkgD"]),
        _feature("E", [], ["PkgE", "PkgD"]),
    ]
    closures = set()
    for order, inner in itertools.product(itertools.permutations(["B", "C", "E"]), itertools.permutations(["D", "E"])):
        store = _store(
            _feature("A", list(order), ["PkgA"]),
            _feature("C", list(inner), ["PkgC"]),
            *leaves,
        )
        closures.add(DependencyResolver(store).resolve(store.features["A"]).external_packages)

    assert closures == {frozenset({"PkgA", "PkgB", "PkgC", "PkgD", "PkgE"})}


def test_deep_feature_chain_resolves_without_recursion_error() -> None:
    depth = 1500
    chain = [_feature(f"F{i}", [f"F{i + 1}"], [f"Pkg{i}"]) for i in range(depth)]
    chain.append(_feature(f"F{depth}", [], ["Leaf"]))
    store = _store(*chain)

    closure = DependencyResolver(store).external_closure(store.features["F0"])

    assert len(closure) == depth + 1
    assert {"Pkg0", f"Pkg{depth - 1}", "Leaf"} <= closure


def test_cyclic_feature_graph_terminates() -> None:
    store = _store(
        _feature("A", ["B"], ["PkgA"]),
        _feature("B", ["A"], ["PkgB"]),
    )
    resolver = DependencyResolver(store)

    assert resolver.external_closure(store.features["A"]) == {"PkgA", "PkgB"}
    app = AppSpec(name="Foo", dependencies=["A"])
    assert set(resolver(app)) == {
        Dependency.internal_module("A"),
        Dependency.external_package("PkgA"),
        Dependency.external_package("PkgB"),
    }


def test_self_dependency_terminates() -> None:
    store = _store(_feature("A", ["A"], ["PkgA"]))
    assert DependencyResolver(store).external_closure(store.features["A"]) == {"PkgA"}


def test_app_resolution_unions_its_own_external_packages() -> None:
    store = _store(_feature("Shared", [], ["Alamofire"]))
    app = AppSpec(name="Foo", dependencies=["Shared", "Shared"], external_dependencies=["SnapKit"])

    dependencies = DependencyResolver(store)(app)

    assert dependencies == [
        Dependency.internal_module("Shared"),
        Dependency.external_package("Alamofire"),
        Dependency.external_package("SnapKit"),
    ]


def test_direct_feature_also_reachable_transitively_keeps_its_packages() -> None:
    store = _store(
        _feature("B", ["C"]),
        _feature("C", [], ["PkgC"]),
    )
    app = AppSpec(name="Foo", dependencies=["B", "C"])
    result = DependencyResolver(store).resolve(app)

    assert result.internal_modules == ("B", "C")
    assert result.external_packages == frozenset({"PkgC"})


def test_unknown_name_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    store = _store()
    with caplog.at_level("WARNING", logger="xcproj_factory.resolver"):
        DependencyResolver(store).resolve(AppSpec(name="Foo", dependencies=["Missing"]))
    assert "Missing" in caplog.text
