"""Swift scaffolds: SwiftUI apps and Swift packages."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Language
from procgen.strategies.languages.base import LanguageScaffold
from procgen.templates import pascal_case

PACKAGE_SWIFT = """\
// swift-tools-version:5.9
import PackageDescription

let package = Package(
    name: "{{ module }}",
{% if app %}
    platforms: [.iOS(.v17), .macOS(.v14)],
{% endif %}
    products: [
{% if app %}
        .executable(name: "{{ module }}", targets: ["{{ module }}"]),
{% else %}
        .library(name: "{{ module }}", targets: ["{{ module }}"]),
{% endif %}
    ],
    targets: [
{% if app %}
        .executableTarget(name: "{{ module }}"),
{% else %}
        .target(name: "{{ module }}"),
{% endif %}
        .testTarget(name: "{{ module }}Tests", dependencies: ["{{ module }}"]),
    ]
)
"""

APP_SWIFT = """\
import SwiftUI

@main
struct {{ module }}App: App {
    var body: some Scene {
        WindowGroup {
            ContentView()
        }
    }
}
"""

CONTENT_VIEW = """\
import SwiftUI

func greeting(_ name: String) -> String {
    "Hello, \\(name)!"
}

struct ContentView: View {
    var body: some View {
        Text(greeting("{{ project_name }}"))
            .padding()
    }
}
"""

LIBRARY_SWIFT = """\
public enum Greeter {
    public static func greet(_ name: String) -> String {
        "Hello, \\(name)!"
    }
}
"""

APP_TEST = """\
import XCTest
@testable import {{ module }}

final class {{ module }}Tests: XCTestCase {
    func testGreeting() {
        XCTAssertEqual(greeting("world"), "Hello, world!")
    }
}
"""

LIBRARY_TEST = """\
import XCTest
@testable import {{ module }}

final class {{ module }}Tests: XCTestCase {
    func testGreet() {
        XCTAssertEqual(Greeter.greet("world"), "Hello, world!")
    }
}
"""


def mobile(ctx: GenerationContext) -> None:
    module = pascal_case(ctx.slug)
    ctx.write("Package.swift", ctx.render(PACKAGE_SWIFT, module=module, app=True))
    ctx.write(f"Sources/{module}/{module}App.swift", ctx.render(APP_SWIFT, module=module))
    ctx.write(f"Sources/{module}/ContentView.swift", ctx.render(CONTENT_VIEW))
    ctx.write(
        f"Tests/{module}Tests/{module}Tests.swift",
        ctx.render(APP_TEST, module=module),
    )


def library(ctx: GenerationContext) -> None:
    module = pascal_case(ctx.slug)
    ctx.write("Package.swift", ctx.render(PACKAGE_SWIFT, module=module, app=False))
    ctx.write(f"Sources/{module}/{module}.swift", LIBRARY_SWIFT)
    ctx.write(
        f"Tests/{module}Tests/{module}Tests.swift",
        ctx.render(LIBRARY_TEST, module=module),
    )


class SwiftScaffold(LanguageScaffold):
    id = "scaffold-swift"
    name = "Swift package"
    languages = (Language.SWIFT,)
    handlers = {Archetype.MOBILE: mobile}
    fallback = library
