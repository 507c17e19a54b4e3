"""Go scaffolds: Gin/Echo services, Cobra CLIs and libraries."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Framework, Language, ORM
from procgen.strategies.languages.base import LanguageScaffold

GO_MOD = """\
module github.com/example/{{ slug }}

go 1.22
{% if requires %}

require (
{% for module, version in requires %}
	{{ module }} {{ version }}
{% endfor %}
)
{% endif %}
"""

GIN_MAIN = """\
package main

import (
	"net/http"
	"os"

	"github.com/gin-gonic/gin"
)

func setupRouter() *gin.Engine {
	r := gin.Default()
	r.GET("/health", func(c *gin.Context) {
		c.JSON(http.StatusOK, gin.H{"status": "ok", "service": "{{ slug }}"})
	})
	return r
}

func main() {
	port := os.Getenv("PORT")
	if port == "" {
		port = "{{ port }}"
	}
	setupRouter().Run(":" + port)
}
"""

GIN_TEST = """\
package main

import (
	"net/http"
	"net/http/httptest"
	"testing"
)

func TestHealth(t *testing.T) {
	w := httptest.NewRecorder()
	req, _ := http.NewRequest(http.MethodGet, "/health", nil)
	setupRouter().ServeHTTP(w, req)
	if w.Code != http.StatusOK {
		t.Fatalf("expected 200, got %d", w.Code)
	}
}
"""

ECHO_MAIN = """\
package main

import (
	"net/http"
	"os"

	"github.com/labstack/echo/v4"
)

func newServer() *echo.Echo {
	e := echo.New()
	e.GET("/health", func(c echo.Context) error {
		return c.JSON(http.StatusOK, map[string]string{"status": "ok", "service": "{{ slug }}"})
	})
	return e
}

func main() {
	port := os.Getenv("PORT")
	if port == "" {
		port = "{{ port }}"
	}
	newServer().Logger.Fatal(newServer().Start(":" + port))
}
"""

ECHO_TEST = """\
package main

import (
	"net/http"
	"net/http/httptest"
	"testing"
)

func TestHealth(t *testing.T) {
	req := httptest.NewRequest(http.MethodGet, "/health", nil)
	rec := httptest.NewRecorder()
	newServer().ServeHTTP(rec, req)
	if rec.Code != http.StatusOK {
		t.Fatalf("expected 200, got %d", rec.Code)
	}
}
"""

COBRA_MAIN = """\
package main

import "github.com/example/{{ slug }}/cmd"

func main() {
	cmd.Execute()
}
"""

COBRA_ROOT = """\
package cmd

import (
	"fmt"
	"os"

	"github.com/spf13/cobra"
)

var rootCmd = &cobra.Command{
	Use:   "{{ slug }}",
	Short: "{{ project_name }} command-line tool",
}

var helloCmd = &cobra.Command{
	Use:   "hello [name]",
	Short: "Print a greeting",
	Args:  cobra.MaximumNArgs(1),
	Run: func(cmd *cobra.Command, args []string) {
		name := "world"
		if len(args) > 0 {
			name = args[0]
		}
		fmt.Println(Greeting(name))
	},
}

func Greeting(name string) string {
	return fmt.Sprintf("Hello, %s!", name)
}

func init() {
	rootCmd.AddCommand(helloCmd)
}

func Execute() {
	if err := rootCmd.Execute(); err != nil {
		fmt.Fprintln(os.Stderr, err)
		os.Exit(1)
	}
}
"""

COBRA_TEST = """\
package cmd

import "testing"

func TestGreeting(t *testing.T) {
	if got := Greeting("world"); got != "Hello, world!" {
		t.Fatalf("unexpected greeting %q", got)
	}
}
"""

LIBRARY_SRC = """\
// Package {{ pkg }} provides {{ project_name }}.
package {{ pkg }}

import "fmt"

// Greet returns a greeting for name.
func Greet(name string) string {
	return fmt.Sprintf("Hello, %s!", name)
}
"""

LIBRARY_TEST = """\
package {{ pkg }}

import "testing"

func TestGreet(t *testing.T) {
	if got := Greet("world"); got != "Hello, world!" {
		t.Fatalf("unexpected greeting %q", got)
	}
}
"""

GORM_DB = """\
package main

import (
	"os"

	"gorm.io/gorm"
	{{ driver_import }}
)

func openDatabase() (*gorm.DB, error) {
	dsn := os.Getenv("DATABASE_URL")
	if dsn == "" {
		dsn = "{{ dsn }}"
	}
	return gorm.Open({{ driver_open }}(dsn), &gorm.Config{})
}
"""

MAKEFILE = """\
.PHONY: build run test

build:
\tgo build -o bin/{{ slug }} .

run:
\tgo run .

test:
\tgo test ./...
"""

_GORM_DRIVERS: dict[str, tuple[str, str, str, str]] = {
    "postgres": ("gorm.io/driver/postgres", "v1.5.7", "postgres.Open", "host=localhost user=postgres password=postgres dbname={ident} port=5432"),
    "mysql": ("gorm.io/driver/mysql", "v1.5.6", "mysql.Open", "root:root@tcp(localhost:3306)/{ident}"),
    "sqlite": ("gorm.io/driver/sqlite", "v1.5.5", "sqlite.Open", "{ident}.db"),
}


def _go_mod(ctx: GenerationContext, requires: list[tuple[str, str]]) -> None:
    ctx.write("go.mod", ctx.render(GO_MOD, requires=requires))
    ctx.write("Makefile", ctx.render(MAKEFILE))


def _gorm(ctx: GenerationContext, requires: list[tuple[str, str]]) -> None:
    if ctx.stack.orm is not ORM.GORM:
        return
    driver = _GORM_DRIVERS.get(ctx.stack.database.value)
    if driver is None:
        return
    module, version, opener, dsn = driver
    requires.append(("gorm.io/gorm", "v1.25.10"))
    requires.append((module, version))
    ctx.write(
        "db.go",
        ctx.render(
            GORM_DB,
            driver_import=f'"{module}"',
            driver_open=opener,
            dsn=dsn.format(ident=ctx.identifier),
        ),
    )


def backend(ctx: GenerationContext) -> None:
    requires: list[tuple[str, str]] = []
    if ctx.stack.framework is Framework.ECHO:
        requires.append(("github.com/labstack/echo/v4", "v4.12.0"))
        ctx.write("main.go", ctx.render(ECHO_MAIN))
        ctx.write("main_test.go", ECHO_TEST)
    else:
        requires.append(("github.com/gin-gonic/gin", "v1.10.0"))
        ctx.write("main.go", ctx.render(GIN_MAIN))
        ctx.write("main_test.go", GIN_TEST)
    _gorm(ctx, requires)
    _go_mod(ctx, requires)


def cli(ctx: GenerationContext) -> None:
    requires = [("github.com/spf13/cobra", "v1.8.0")]
    ctx.write("main.go", ctx.render(COBRA_MAIN))
    ctx.write("cmd/root.go", ctx.render(COBRA_ROOT))
    ctx.write("cmd/root_test.go", COBRA_TEST)
    _go_mod(ctx, requires)


def library(ctx: GenerationContext) -> None:
    pkg = ctx.identifier.replace("_", "")
    ctx.write(f"{pkg}.go", ctx.render(LIBRARY_SRC, pkg=pkg))
    ctx.write(f"{pkg}_test.go", ctx.render(LIBRARY_TEST, pkg=pkg))
    _go_mod(ctx, [])


class GoScaffold(LanguageScaffold):
    id = "scaffold-go"
    name = "Go module"
    languages = (Language.GO,)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.CLI: cli,
        Archetype.LIBRARY: library,
    }
    fallback = library
