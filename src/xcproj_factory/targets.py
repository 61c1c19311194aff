from __future__ import annotations

from collections.abc import Sequence

from .models import AppSpec, Dependency, Target, TargetKind, TargetScheme, TargetSource


class TargetAssembler:
    """Builds the application, unit-test and UI-test targets of one app.

    All three targets link the same resolved dependencies: the test bundles
    run against the app's linked modules and need them at build time.
    """

    def __init__(self, app: AppSpec, *, platform: str = "iOS") -> None:
        self.app = app
        self.platform = platform

    def _target(
        self,
        name: str,
        kind: TargetKind,
        dependencies: Sequence[Dependency],
        test_targets: Sequence[str] = (),
    ) -> Target:
        return Target(
            name=name,
            kind=kind,
            platform=self.platform,
            sources=(TargetSource(path=name),),
            dependencies=tuple(dependencies),
            scheme=TargetScheme(test_targets=tuple(test_targets), gather_coverage_data=True),
        )

    def app_target(self, dependencies: Sequence[Dependency]) -> Target:
        return self._target(
            self.app.target_name,
            TargetKind.APPLICATION,
            dependencies,
            test_targets=(self.app.unit_test_target_name, self.app.ui_test_target_name),
        )

    def unit_test_target(self, dependencies: Sequence[Dependency]) -> Target:
        return self._target(self.app.unit_test_target_name, TargetKind.UNIT_TEST_BUNDLE, dependencies)

    def ui_test_target(self, dependencies: Sequence[Dependency]) -> Target:
        return self._target(self.app.ui_test_target_name, TargetKind.UI_TEST_BUNDLE, dependencies)

    def assemble(self, dependencies: Sequence[Dependency]) -> tuple[Target, Target, Target]:
        shared = tuple(dependencies)
        return (
            self.app_target(shared),
            self.unit_test_target(shared),
            self.ui_test_target(shared),
        )
