"""C# scaffolds: ASP.NET Core minimal APIs, MonoGame and class libraries."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, Language, ORM, TestingFramework
from procgen.strategies.languages.base import LanguageScaffold
from procgen.templates import pascal_case

CSPROJ = """\
<Project Sdk="{{ sdk }}">

  <PropertyGroup>
{% if output_type %}
    <OutputType>{{ output_type }}</OutputType>
{% endif %}
    <TargetFramework>net8.0</TargetFramework>
    <Nullable>enable</Nullable>
    <ImplicitUsings>enable</ImplicitUsings>
    <RootNamespace>{{ namespace }}</RootNamespace>
  </PropertyGroup>
{% if packages %}

  <ItemGroup>
{% for name, version in packages %}
    <PackageReference Include="{{ name }}" Version="{{ version }}" />
{% endfor %}
  </ItemGroup>
{% endif %}

</Project>
"""

TEST_CSPROJ = """\
<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <Nullable>enable</Nullable>
    <ImplicitUsings>enable</ImplicitUsings>
    <IsPackable>false</IsPackable>
  </PropertyGroup>

  <ItemGroup>
    <PackageReference Include="Microsoft.NET.Test.Sdk" Version="17.9.0" />
{% if testing == "nunit" %}
    <PackageReference Include="NUnit" Version="4.1.0" />
    <PackageReference Include="NUnit3TestAdapter" Version="4.5.0" />
{% else %}
    <PackageReference Include="xunit" Version="2.7.0" />
    <PackageReference Include="xunit.runner.visualstudio" Version="2.5.7" />
{% endif %}
  </ItemGroup>

  <ItemGroup>
    <ProjectReference Include="../../src/{{ namespace }}/{{ namespace }}.csproj" />
  </ItemGroup>

</Project>
"""

PROGRAM_CS = """\
{% if ef %}
using Microsoft.EntityFrameworkCore;
using {{ namespace }}.Data;

{% endif %}
var builder = WebApplication.CreateBuilder(args);
{% if ef %}
builder.Services.AddDbContext<AppDbContext>(options =>
    options.{{ ef_provider }}(builder.Configuration.GetConnectionString("Default")));
{% endif %}

var app = builder.Build();

app.MapGet("/health", () => Health.Status());

app.Run("http://0.0.0.0:{{ port }}");

public static class Health
{
    public static object Status() => new { status = "ok", service = "{{ slug }}" };
}
"""

DB_CONTEXT = """\
using Microsoft.EntityFrameworkCore;

namespace {{ namespace }}.Data;

public class AppDbContext : DbContext
{
    public AppDbContext(DbContextOptions<AppDbContext> options) : base(options)
    {
    }
}
"""

APPSETTINGS = """\
{
  "Logging": {
    "LogLevel": {
      "Default": "Information"
    }
  },
  "ConnectionStrings": {
    "Default": "{{ connection_string }}"
  }
}
"""

GAME_CS = """\
using Microsoft.Xna.Framework;
using Microsoft.Xna.Framework.Graphics;

namespace {{ namespace }};

public class Game1 : Game
{
    private readonly GraphicsDeviceManager _graphics;

    public Game1()
    {
        _graphics = new GraphicsDeviceManager(this);
        Content.RootDirectory = "Content";
        Window.Title = "{{ project_name }}";
    }

    protected override void Draw(GameTime gameTime)
    {
        GraphicsDevice.Clear(Color.CornflowerBlue);
        base.Draw(gameTime);
    }
}
"""

GAME_PROGRAM = """\
using var game = new {{ namespace }}.Game1();
game.Run();
"""

LIBRARY_CS = """\
namespace {{ namespace }};

public static class Greeter
{
    public static string Greet(string name) => $"Hello, {name}!";
}
"""

LIBRARY_TEST_CS = """\
{% if testing == "nunit" %}
using NUnit.Framework;

namespace {{ namespace }}.Tests;

public class GreeterTests
{
    [Test]
    public void GreetsByName()
    {
        Assert.That(Greeter.Greet("world"), Is.EqualTo("Hello, world!"));
    }
}
{% else %}
using Xunit;

namespace {{ namespace }}.Tests;

public class GreeterTests
{
    [Fact]
    public void GreetsByName()
    {
        Assert.Equal("Hello, world!", Greeter.Greet("world"));
    }
}
{% endif %}
"""

_EF_PROVIDERS: dict[str, tuple[str, str, str]] = {
    "postgres": (
        "Npgsql.EntityFrameworkCore.PostgreSQL",
        "UseNpgsql",
        "Host=localhost;Database={ident};Username=postgres;Password=postgres",
    ),
    "mysql": (
        "Pomelo.EntityFrameworkCore.MySql",
        "UseMySql",
        "Server=localhost;Database={ident};User=root;Password=root",
    ),
    "sqlite": (
        "Microsoft.EntityFrameworkCore.Sqlite",
        "UseSqlite",
        "Data Source={ident}.db",
    ),
}


def _namespace(ctx: GenerationContext) -> str:
    return pascal_case(ctx.slug)


def _test_project(ctx: GenerationContext, namespace: str) -> None:
    testing = ctx.stack.testing.value
    if ctx.stack.testing not in (TestingFramework.XUNIT, TestingFramework.NUNIT):
        testing = TestingFramework.XUNIT.value
    ctx.write(
        f"tests/{namespace}.Tests/{namespace}.Tests.csproj",
        ctx.render(TEST_CSPROJ, namespace=namespace, testing=testing),
    )
    ctx.write(
        f"tests/{namespace}.Tests/GreeterTests.cs",
        ctx.render(LIBRARY_TEST_CS, namespace=namespace, testing=testing),
    )


def backend(ctx: GenerationContext) -> None:
    namespace = _namespace(ctx)
    packages: list[tuple[str, str]] = []
    provider = _EF_PROVIDERS.get(ctx.stack.database.value)
    ef = ctx.stack.orm is ORM.ENTITY_FRAMEWORK and provider is not None
    connection_string = ""
    if ef:
        package, method, connection = provider
        packages = [("Microsoft.EntityFrameworkCore", "8.0.4"), (package, "8.0.4")]
        connection_string = connection.format(ident=ctx.identifier)
        ctx.write(
            f"src/{namespace}/Data/AppDbContext.cs",
            ctx.render(DB_CONTEXT, namespace=namespace),
        )
    ctx.write(
        f"src/{namespace}/{namespace}.csproj",
        ctx.render(
            CSPROJ,
            sdk="Microsoft.NET.Sdk.Web",
            output_type="",
            namespace=namespace,
            packages=packages,
        ),
    )
    ctx.write(
        f"src/{namespace}/Program.cs",
        ctx.render(
            PROGRAM_CS,
            namespace=namespace,
            ef=ef,
            ef_provider=provider[1] if ef else "",
        ),
    )
    ctx.write(
        f"src/{namespace}/appsettings.json",
        ctx.render(APPSETTINGS, connection_string=connection_string),
    )
    ctx.write(f"src/{namespace}/Greeter.cs", ctx.render(LIBRARY_CS, namespace=namespace))
    _test_project(ctx, namespace)


def game(ctx: GenerationContext) -> None:
    namespace = _namespace(ctx)
    ctx.write(
        f"src/{namespace}/{namespace}.csproj",
        ctx.render(
            CSPROJ,
            sdk="Microsoft.NET.Sdk",
            output_type="WinExe",
            namespace=namespace,
            packages=[("MonoGame.Framework.DesktopGL", "3.8.1.303")],
        ),
    )
    ctx.write(f"src/{namespace}/Game1.cs", ctx.render(GAME_CS, namespace=namespace))
    ctx.write(f"src/{namespace}/Program.cs", ctx.render(GAME_PROGRAM, namespace=namespace))
    ctx.write(f"src/{namespace}/Greeter.cs", ctx.render(LIBRARY_CS, namespace=namespace))
    _test_project(ctx, namespace)


def library(ctx: GenerationContext) -> None:
    namespace = _namespace(ctx)
    ctx.write(
        f"src/{namespace}/{namespace}.csproj",
        ctx.render(
            CSPROJ,
            sdk="Microsoft.NET.Sdk",
            output_type="",
            namespace=namespace,
            packages=[],
        ),
    )
    ctx.write(f"src/{namespace}/Greeter.cs", ctx.render(LIBRARY_CS, namespace=namespace))
    _test_project(ctx, namespace)


class DotnetScaffold(LanguageScaffold):
    id = "scaffold-dotnet"
    name = ".NET solution"
    languages = (Language.CSHARP,)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.GAME: game,
        Archetype.LIBRARY: library,
    }
    fallback = library
