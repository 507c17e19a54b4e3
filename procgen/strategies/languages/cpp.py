"""C++ scaffolds: CMake projects for Qt, SDL2 and plain libraries."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Language, TestingFramework
from procgen.strategies.languages.base import LanguageScaffold

CMAKE_LISTS = """\
cmake_minimum_required(VERSION 3.20)
project({{ ident }} VERSION 0.1.0 LANGUAGES CXX)

set(CMAKE_CXX_STANDARD 17)
set(CMAKE_CXX_STANDARD_REQUIRED ON)
{% if qt %}
set(CMAKE_AUTOMOC ON)

find_package(Qt6 REQUIRED COMPONENTS Widgets)
{% endif %}
{% if sdl %}

find_package(SDL2 REQUIRED)
{% endif %}

add_library({{ ident }}_core src/greeter.cpp)
target_include_directories({{ ident }}_core PUBLIC include)
{% if executable %}

add_executable({{ ident }} src/main.cpp)
target_link_libraries({{ ident }} PRIVATE {{ ident }}_core{% if qt %} Qt6::Widgets{% endif %}{% if sdl %} SDL2::SDL2{% endif %})
{% endif %}

include(FetchContent)
{% if catch2 %}
FetchContent_Declare(
  Catch2
  GIT_REPOSITORY https://github.com/catchorg/Catch2.git
  GIT_TAG v3.5.3
)
FetchContent_MakeAvailable(Catch2)

enable_testing()
add_executable({{ ident }}_tests tests/greeter_test.cpp)
target_link_libraries({{ ident }}_tests PRIVATE {{ ident }}_core Catch2::Catch2WithMain)
add_test(NAME {{ ident }}_tests COMMAND {{ ident }}_tests)
{% else %}
FetchContent_Declare(
  googletest
  URL https://github.com/google/googletest/archive/refs/tags/v1.14.0.zip
)
FetchContent_MakeAvailable(googletest)

enable_testing()
add_executable({{ ident }}_tests tests/greeter_test.cpp)
target_link_libraries({{ ident }}_tests PRIVATE {{ ident }}_core GTest::gtest_main)
include(GoogleTest)
gtest_discover_tests({{ ident }}_tests)
{% endif %}
"""

GREETER_H = """\
#pragma once

#include <string>

namespace {{ ident }} {

std::string greet(const std::string& name);

}  // namespace {{ ident }}
"""

GREETER_CPP = """\
#include "{{ ident }}/greeter.h"

namespace {{ ident }} {

std::string greet(const std::string& name) {
    return "Hello, " + name + "!";
}

}  // namespace {{ ident }}
"""

GTEST_TEST = """\
#include <gtest/gtest.h>

#include "{{ ident }}/greeter.h"

TEST(GreeterTest, GreetsByName) {
    EXPECT_EQ({{ ident }}::greet("world"), "Hello, world!");
}
"""

CATCH2_TEST = """\
#include <catch2/catch_test_macros.hpp>

#include "{{ ident }}/greeter.h"

TEST_CASE("greets by name") {
    REQUIRE({{ ident }}::greet("world") == "Hello, world!");
}
"""

QT_MAIN = """\
#include <QApplication>
#include <QLabel>

#include "{{ ident }}/greeter.h"

int main(int argc, char* argv[]) {
    QApplication app(argc, argv);
    QLabel label(QString::fromStdString({{ ident }}::greet("{{ project_name }}")));
    label.setWindowTitle("{{ project_name }}");
    label.resize(480, 320);
    label.show();
    return app.exec();
}
"""

SDL_MAIN = """\
#include <SDL.h>

int main(int argc, char* argv[]) {
    if (SDL_Init(SDL_INIT_VIDEO) != 0) {
        return 1;
    }
    SDL_Window* window = SDL_CreateWindow(
        "{{ project_name }}", SDL_WINDOWPOS_CENTERED, SDL_WINDOWPOS_CENTERED, 800, 600, 0);
    bool running = true;
    SDL_Event event;
    while (running) {
        while (SDL_PollEvent(&event)) {
            if (event.type == SDL_QUIT) {
                running = false;
            }
        }
        SDL_Delay(16);
    }
    SDL_DestroyWindow(window);
    SDL_Quit();
    return 0;
}
"""


def _project(ctx: GenerationContext, *, qt: bool = False, sdl: bool = False, main: str = "") -> None:
    catch2 = ctx.stack.testing is TestingFramework.CATCH2
    ident = ctx.identifier
    ctx.write(
        "CMakeLists.txt",
        ctx.render(CMAKE_LISTS, qt=qt, sdl=sdl, executable=bool(main), catch2=catch2),
    )
    ctx.write(f"include/{ident}/greeter.h", ctx.render(GREETER_H))
    ctx.write("src/greeter.cpp", ctx.render(GREETER_CPP))
    ctx.write("tests/greeter_test.cpp", ctx.render(CATCH2_TEST if catch2 else GTEST_TEST))
    if main:
        ctx.write("src/main.cpp", ctx.render(main))


def desktop(ctx: GenerationContext) -> None:
    _project(ctx, qt=True, main=QT_MAIN)


def game(ctx: GenerationContext) -> None:
    _project(ctx, sdl=True, main=SDL_MAIN)


def library(ctx: GenerationContext) -> None:
    _project(ctx)


class CppScaffold(LanguageScaffold):
    id = "scaffold-cpp"
    name = "CMake project"
    languages = (Language.CPP,)
    handlers = {
        Archetype.DESKTOP: desktop,
        Archetype.GAME: game,
        Archetype.LIBRARY: library,
    }
    fallback = library
