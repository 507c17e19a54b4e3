"""PHP scaffolds: Laravel services and Composer libraries."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Language
from procgen.strategies.languages.base import LanguageScaffold
from procgen.templates import pascal_case
from procgen.utils import dump_json

PUBLIC_INDEX = """\
<?php

use Illuminate\\Http\\Request;

define('LARAVEL_START', microtime(true));

require __DIR__.'/../vendor/autoload.php';

(require_once __DIR__.'/../bootstrap/app.php')
    ->handleRequest(Request::capture());
"""

BOOTSTRAP_APP = """\
<?php

use Illuminate\\Foundation\\Application;
use Illuminate\\Foundation\\Configuration\\Exceptions;
use Illuminate\\Foundation\\Configuration\\Middleware;

return Application::configure(basePath: dirname(__DIR__))
    ->withRouting(
        api: __DIR__.'/../routes/api.php',
        health: '/up',
    )
    ->withMiddleware(function (Middleware $middleware) {
        //
    })
    ->withExceptions(function (Exceptions $exceptions) {
        //
    })->create();
"""

API_ROUTES = """\
<?php

use Illuminate\\Support\\Facades\\Route;

Route::get('/health', function () {
    return ['status' => 'ok', 'service' => '{{ slug }}'];
});
"""

ARTISAN = """\
#!/usr/bin/env php
<?php

use Symfony\\Component\\Console\\Input\\ArgvInput;

define('LARAVEL_START', microtime(true));

require __DIR__.'/vendor/autoload.php';

$status = (require_once __DIR__.'/bootstrap/app.php')
    ->handleCommand(new ArgvInput);

exit($status);
"""

DATABASE_CONFIG = """\
<?php

return [
    'default' => env('DB_CONNECTION', '{{ connection }}'),
    'connections' => [
        '{{ connection }}' => [
            'driver' => '{{ connection }}',
            'url' => env('DATABASE_URL'),
            'database' => env('DB_DATABASE', '{{ ident }}'),
        ],
    ],
];
"""

HEALTH_TEST = """\
<?php

namespace Tests\\Feature;

use Tests\\TestCase;

class HealthTest extends TestCase
{
    public function test_health_reports_ok(): void
    {
        $this->getJson('/api/health')->assertOk()->assertJson(['status' => 'ok']);
    }
}
"""

TEST_CASE = """\
<?php

namespace Tests;

use Illuminate\\Foundation\\Testing\\TestCase as BaseTestCase;

abstract class TestCase extends BaseTestCase
{
}
"""

PHPUNIT_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<phpunit bootstrap="vendor/autoload.php" colors="true">
  <testsuites>
    <testsuite name="{{ suite }}">
      <directory>tests</directory>
    </testsuite>
  </testsuites>
</phpunit>
"""

LIBRARY_SRC = """\
<?php

declare(strict_types=1);

namespace {{ namespace }};

final class Greeter
{
    public static function greet(string $name): string
    {
        return "Hello, {$name}!";
    }
}
"""

LIBRARY_TEST = """\
<?php

declare(strict_types=1);

namespace {{ namespace }}\\Tests;

use {{ namespace }}\\Greeter;
use PHPUnit\\Framework\\TestCase;

final class GreeterTest extends TestCase
{
    public function testGreetsByName(): void
    {
        $this->assertSame('Hello, world!', Greeter::greet('world'));
    }
}
"""

_CONNECTIONS = {"postgres": "pgsql", "mysql": "mysql", "sqlite": "sqlite"}


def _composer(ctx: GenerationContext, namespace: str, require: dict, *, kind: str) -> None:
    autoload = {"psr-4": {f"{namespace}\\": "src/"}}
    autoload_dev = {"psr-4": {f"{namespace}\\Tests\\": "tests/"}}
    if kind == "project":
        autoload = {"psr-4": {"App\\": "app/"}}
        autoload_dev = {"psr-4": {"Tests\\": "tests/"}}
    ctx.write(
        "composer.json",
        dump_json(
            {
                "name": f"example/{ctx.slug}",
                "description": ctx.project_name,
                "type": kind,
                "license": "MIT",
                "require": require,
                "require-dev": {"phpunit/phpunit": "^11.0"},
                "autoload": autoload,
                "autoload-dev": autoload_dev,
                "scripts": {"test": "phpunit"},
            }
        ),
    )
    ctx.write("phpunit.xml", ctx.render(PHPUNIT_XML, suite=pascal_case(ctx.slug)))


def backend(ctx: GenerationContext) -> None:
    ctx.write("public/index.php", PUBLIC_INDEX)
    ctx.write("bootstrap/app.php", BOOTSTRAP_APP)
    ctx.write("routes/api.php", ctx.render(API_ROUTES))
    ctx.write("artisan", ARTISAN)
    ctx.write("tests/TestCase.php", TEST_CASE)
    ctx.write("tests/Feature/HealthTest.php", HEALTH_TEST)
    connection = _CONNECTIONS.get(ctx.stack.database.value)
    if connection is not None:
        ctx.write("config/database.php", ctx.render(DATABASE_CONFIG, connection=connection))
    _composer(
        ctx,
        "App",
        {"php": "^8.2", "laravel/framework": "^11.0"},
        kind="project",
    )


def library(ctx: GenerationContext) -> None:
    namespace = pascal_case(ctx.slug)
    ctx.write("src/Greeter.php", ctx.render(LIBRARY_SRC, namespace=namespace))
    ctx.write("tests/GreeterTest.php", ctx.render(LIBRARY_TEST, namespace=namespace))
    _composer(ctx, namespace, {"php": "^8.2"}, kind="library")


class PhpScaffold(LanguageScaffold):
    id = "scaffold-php"
    name = "PHP project"
    languages = (Language.PHP,)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.LIBRARY: library,
    }
    fallback = library
