"""Initial file contents for freshly scaffolded targets."""

from __future__ import annotations

import plistlib
import re
from typing import Any

_BUNDLE_BASE: dict[str, Any] = {
    "CFBundleDevelopmentRegion": "$(DEVELOPMENT_LANGUAGE)",
    "CFBundleExecutable": "$(EXECUTABLE_NAME)",
    "CFBundleIdentifier": "$(PRODUCT_BUNDLE_IDENTIFIER)",
    "CFBundleInfoDictionaryVersion": "6.0",
    "CFBundleName": "$(PRODUCT_NAME)",
    "CFBundleShortVersionString": "1.0",
    "CFBundleVersion": "1",
}


def _swift_identifier(name: str) -> str:
    """Strip characters Swift does not allow in a type name."""
    identifier = re.sub(r"[^A-Za-z0-9_]", "", name)
    if not identifier:
        return "App"
    if identifier[0].isdigit():
        return f"_{identifier}"
    return identifier


def _render_plist(values: dict[str, Any]) -> str:
    return plistlib.dumps(values, sort_keys=True).decode("utf-8")


def app_plist() -> str:
    return _render_plist(
        {
            **_BUNDLE_BASE,
            "CFBundlePackageType": "APPL",
            "LSRequiresIPhoneOS": True,
            "UILaunchStoryboardName": "LaunchScreen",
            "UIRequiredDeviceCapabilities": ["armv7"],
            "UISupportedInterfaceOrientations": [
                "UIInterfaceOrientationPortrait",
                "UIInterfaceOrientationLandscapeLeft",
                "UIInterfaceOrientationLandscapeRight",
            ],
        }
    )


def unit_test_plist() -> str:
    return _render_plist({**_BUNDLE_BASE, "CFBundlePackageType": "BNDL"})


def ui_test_plist() -> str:
    # UI test runners are bundles too; same keys as unit tests.
    return _render_plist({**_BUNDLE_BASE, "CFBundlePackageType": "BNDL"})


def dependencies_source(feature: str) -> str:
    return (
        "import Foundation\n"
        "\n"
        f"/// Dependency container for {feature}.\n"
        f"final class {_swift_identifier(feature)}Dependencies {{\n"
        "\n"
        "    init() {}\n"
        "}\n"
    )


def app_delegate_source() -> str:
    return (
        "import UIKit\n"
        "\n"
        "@UIApplicationMain\n"
        "class AppDelegate: UIResponder, UIApplicationDelegate {\n"
        "\n"
        "    var window: UIWindow?\n"
        "\n"
        "    func application(\n"
        "        _ application: UIApplication,\n"
        "        didFinishLaunchingWithOptions launchOptions: [UIApplication.LaunchOptionsKey: Any]?\n"
        "    ) -> Bool {\n"
        "        return true\n"
        "    }\n"
        "}\n"
    )
