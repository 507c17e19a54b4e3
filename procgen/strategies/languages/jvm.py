"""JVM scaffolds (Java and Kotlin): Spring Boot, Jetpack Compose, libraries.

The build file follows the resolved build tool: Gradle writes
``build.gradle`` (Java) or ``build.gradle.kts`` (Kotlin), Maven writes
``pom.xml``.
"""

from __future__ import annotations

from procgen.engine.registry import GenerationContext
from procgen.models import Archetype, BuildTool, Language
from procgen.strategies.languages.base import LanguageScaffold
from procgen.templates import pascal_case

GROUP = "com.example"

BUILD_GRADLE = """\
plugins {
{% for plugin in plugins %}
    {{ plugin }}
{% endfor %}
}

group = '{{ group }}'
version = '0.1.0'

java {
    sourceCompatibility = '17'
}

repositories {
    mavenCentral()
}

dependencies {
{% for dep in dependencies %}
    {{ dep }}
{% endfor %}
    testImplementation 'org.junit.jupiter:junit-jupiter:5.10.2'
}

tasks.named('test') {
    useJUnitPlatform()
}
"""

BUILD_GRADLE_KTS = """\
plugins {
{% for plugin in plugins %}
    {{ plugin }}
{% endfor %}
}

group = "{{ group }}"
version = "0.1.0"

repositories {
    google()
    mavenCentral()
}

dependencies {
{% for dep in dependencies %}
    {{ dep }}
{% endfor %}
    testImplementation("org.junit.jupiter:junit-jupiter:5.10.2")
}

tasks.withType<Test> {
    useJUnitPlatform()
}
"""

SETTINGS_GRADLE = """\
rootProject.name = '{{ slug }}'
"""

SETTINGS_GRADLE_KTS = """\
rootProject.name = "{{ slug }}"
"""

POM_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0"
         xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
         xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 https://maven.apache.org/xsd/maven-4.0.0.xsd">
  <modelVersion>4.0.0</modelVersion>
{% if spring %}
  <parent>
    <groupId>org.springframework.boot</groupId>
    <artifactId>spring-boot-starter-parent</artifactId>
    <version>3.2.5</version>
  </parent>
{% endif %}
  <groupId>{{ group }}</groupId>
  <artifactId>{{ slug }}</artifactId>
  <version>0.1.0</version>
  <properties>
    <java.version>17</java.version>
    <maven.compiler.source>17</maven.compiler.source>
    <maven.compiler.target>17</maven.compiler.target>
  </properties>
  <dependencies>
{% for group_id, artifact_id, scope in dependencies %}
    <dependency>
      <groupId>{{ group_id }}</groupId>
      <artifactId>{{ artifact_id }}</artifactId>
{% if scope %}
      <scope>{{ scope }}</scope>
{% endif %}
    </dependency>
{% endfor %}
  </dependencies>
{% if spring %}
  <build>
    <plugins>
      <plugin>
        <groupId>org.springframework.boot</groupId>
        <artifactId>spring-boot-maven-plugin</artifactId>
      </plugin>
    </plugins>
  </build>
{% endif %}
</project>
"""

SPRING_APP_JAVA = """\
package {{ package }};

import java.util.Map;

import org.springframework.boot.SpringApplication;
import org.springframework.boot.autoconfigure.SpringBootApplication;
import org.springframework.web.bind.annotation.GetMapping;
import org.springframework.web.bind.annotation.RestController;

@SpringBootApplication
@RestController
public class Application {

    public static void main(String[] args) {
        SpringApplication.run(Application.class, args);
    }

    @GetMapping("/health")
    public Map<String, String> health() {
        return Map.of("status", "ok", "service", "{{ slug }}");
    }
}
"""

SPRING_TEST_JAVA = """\
package {{ package }};

import static org.junit.jupiter.api.Assertions.assertEquals;

import org.junit.jupiter.api.Test;

class ApplicationTest {

    @Test
    void healthReportsOk() {
        assertEquals("ok", new Application().health().get("status"));
    }
}
"""

SPRING_APP_KT = """\
package {{ package }}

import org.springframework.boot.autoconfigure.SpringBootApplication
import org.springframework.boot.runApplication
import org.springframework.web.bind.annotation.GetMapping
import org.springframework.web.bind.annotation.RestController

@SpringBootApplication
@RestController
class Application {
    @GetMapping("/health")
    fun health(): Map<String, String> = mapOf("status" to "ok", "service" to "{{ slug }}")
}

fun main(args: Array<String>) {
    runApplication<Application>(*args)
}
"""

SPRING_TEST_KT = """\
package {{ package }}

import org.junit.jupiter.api.Assertions.assertEquals
import org.junit.jupiter.api.Test

class ApplicationTest {
    @Test
    fun healthReportsOk() {
        assertEquals("ok", Application().health()["status"])
    }
}
"""

APPLICATION_PROPERTIES = """\
spring.application.name={{ slug }}
server.port={{ port }}
{% if jdbc_url %}
spring.datasource.url={{ jdbc_url }}
{% endif %}
"""

COMPOSE_ACTIVITY = """\
package {{ package }}

import android.os.Bundle
import androidx.activity.ComponentActivity
import androidx.activity.compose.setContent
import androidx.compose.material3.Text
import androidx.compose.runtime.Composable

class MainActivity : ComponentActivity() {
    override fun onCreate(savedInstanceState: Bundle?) {
        super.onCreate(savedInstanceState)
        setContent { Greeting("{{ project_name }}") }
    }
}

fun greeting(name: String): String = "Hello, $name!"

@Composable
fun Greeting(name: String) {
    Text(text = greeting(name))
}
"""

COMPOSE_TEST = """\
package {{ package }}

import org.junit.jupiter.api.Assertions.assertEquals
import org.junit.jupiter.api.Test

class GreetingTest {
    @Test
    fun greetsByName() {
        assertEquals("Hello, world!", greeting("world"))
    }
}
"""

ANDROID_MANIFEST = """\
<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android">
  <application android:label="{{ project_name }}">
    <activity android:name=".MainActivity" android:exported="true">
      <intent-filter>
        <action android:name="android.intent.action.MAIN" />
        <category android:name="android.intent.category.LAUNCHER" />
      </intent-filter>
    </activity>
  </application>
</manifest>
"""

LIBRARY_JAVA = """\
package {{ package }};

/** Entry point for {{ project_name }}. */
public final class {{ class_name }} {

    private {{ class_name }}() {
    }

    public static String greet(String name) {
        return "Hello, " + name + "!";
    }
}
"""

LIBRARY_TEST_JAVA = """\
package {{ package }};

import static org.junit.jupiter.api.Assertions.assertEquals;

import org.junit.jupiter.api.Test;

class {{ class_name }}Test {

    @Test
    void greetsByName() {
        assertEquals("Hello, world!", {{ class_name }}.greet("world"));
    }
}
"""

LIBRARY_KT = """\
package {{ package }}

/** Returns a greeting for [name]. */
fun greet(name: String): String = "Hello, $name!"
"""

LIBRARY_TEST_KT = """\
package {{ package }}

import org.junit.jupiter.api.Assertions.assertEquals
import org.junit.jupiter.api.Test

class LibraryTest {
    @Test
    fun greetsByName() {
        assertEquals("Hello, world!", greet("world"))
    }
}
"""

_JDBC_URLS = {
    "postgres": "jdbc:postgresql://localhost:5432/{ident}",
    "mysql": "jdbc:mysql://localhost:3306/{ident}",
    "sqlite": "jdbc:sqlite:{ident}.db",
}

_JDBC_DRIVERS = {
    "postgres": ("org.postgresql", "postgresql"),
    "mysql": ("com.mysql", "mysql-connector-j"),
    "sqlite": ("org.xerial", "sqlite-jdbc"),
}


def _package(ctx: GenerationContext) -> str:
    return f"{GROUP}.{ctx.identifier.replace('_', '')}"


def _kotlin(ctx: GenerationContext) -> bool:
    return ctx.stack.language is Language.KOTLIN


def _source_paths(ctx: GenerationContext, name: str) -> tuple[str, str]:
    lang_dir, ext = ("kotlin", "kt") if _kotlin(ctx) else ("java", "java")
    package_dir = _package(ctx).replace(".", "/")
    return (
        f"src/main/{lang_dir}/{package_dir}/{name}.{ext}",
        f"src/test/{lang_dir}/{package_dir}/{name}Test.{ext}",
    )


def _build_files(
    ctx: GenerationContext,
    coordinates: list[tuple[str, str, str]],
    *,
    spring: bool = False,
    android: bool = False,
) -> None:
    """Write the Gradle or Maven build for *coordinates* (group, artifact, scope)."""
    kotlin = _kotlin(ctx)
    if ctx.stack.build_tool is BuildTool.MAVEN and not android:
        deps = list(coordinates)
        deps.append(("org.junit.jupiter", "junit-jupiter", "test"))
        if kotlin:
            deps.insert(0, ("org.jetbrains.kotlin", "kotlin-stdlib", ""))
        ctx.write(
            "pom.xml",
            ctx.render(POM_XML, group=GROUP, dependencies=deps, spring=spring),
        )
        return

    if kotlin:
        plugins = ['kotlin("jvm") version "1.9.23"']
        if spring:
            plugins = [
                'id("org.springframework.boot") version "3.2.5"',
                'id("io.spring.dependency-management") version "1.1.4"',
                'kotlin("jvm") version "1.9.23"',
                'kotlin("plugin.spring") version "1.9.23"',
            ]
        if android:
            plugins = [
                'id("com.android.application") version "8.3.2"',
                'kotlin("android") version "1.9.23"',
            ]
        deps = [_gradle_dep(group, artifact, scope, kts=True) for group, artifact, scope in coordinates]
        ctx.write(
            "build.gradle.kts",
            ctx.render(BUILD_GRADLE_KTS, plugins=plugins, dependencies=deps, group=GROUP),
        )
        ctx.write("settings.gradle.kts", ctx.render(SETTINGS_GRADLE_KTS))
        return

    plugins = ["id 'java'"]
    if spring:
        plugins += [
            "id 'org.springframework.boot' version '3.2.5'",
            "id 'io.spring.dependency-management' version '1.1.4'",
        ]
    deps = [_gradle_dep(group, artifact, scope, kts=False) for group, artifact, scope in coordinates]
    ctx.write(
        "build.gradle",
        ctx.render(BUILD_GRADLE, plugins=plugins, dependencies=deps, group=GROUP),
    )
    ctx.write("settings.gradle", ctx.render(SETTINGS_GRADLE))


def _gradle_dep(group: str, artifact: str, scope: str, *, kts: bool) -> str:
    configuration = {"test": "testImplementation", "runtime": "runtimeOnly"}.get(
        scope, "implementation"
    )
    if kts:
        return f'{configuration}("{group}:{artifact}")'
    return f"{configuration} '{group}:{artifact}'"


def backend(ctx: GenerationContext) -> None:
    coordinates = [("org.springframework.boot", "spring-boot-starter-web", "")]
    jdbc_url = ""
    if ctx.stack.database.value in _JDBC_URLS:
        jdbc_url = _JDBC_URLS[ctx.stack.database.value].format(ident=ctx.identifier)
        coordinates.append(("org.springframework.boot", "spring-boot-starter-data-jpa", ""))
        group, artifact = _JDBC_DRIVERS[ctx.stack.database.value]
        coordinates.append((group, artifact, "runtime"))
    coordinates.append(("org.springframework.boot", "spring-boot-starter-test", "test"))
    if _kotlin(ctx):
        coordinates.insert(1, ("com.fasterxml.jackson.module", "jackson-module-kotlin", ""))

    main, test = _source_paths(ctx, "Application")
    if _kotlin(ctx):
        ctx.write(main, ctx.render(SPRING_APP_KT, package=_package(ctx)))
        ctx.write(test, ctx.render(SPRING_TEST_KT, package=_package(ctx)))
    else:
        ctx.write(main, ctx.render(SPRING_APP_JAVA, package=_package(ctx)))
        ctx.write(test, ctx.render(SPRING_TEST_JAVA, package=_package(ctx)))
    ctx.write(
        "src/main/resources/application.properties",
        ctx.render(APPLICATION_PROPERTIES, jdbc_url=jdbc_url),
    )
    _build_files(ctx, coordinates, spring=True)


def mobile(ctx: GenerationContext) -> None:
    package = _package(ctx)
    package_dir = package.replace(".", "/")
    ctx.write(
        f"app/src/main/kotlin/{package_dir}/MainActivity.kt",
        ctx.render(COMPOSE_ACTIVITY, package=package),
    )
    ctx.write(
        f"app/src/test/kotlin/{package_dir}/GreetingTest.kt",
        ctx.render(COMPOSE_TEST, package=package),
    )
    ctx.write("app/src/main/AndroidManifest.xml", ctx.render(ANDROID_MANIFEST))
    _build_files(
        ctx,
        [
            ("androidx.activity", "activity-compose:1.9.0", ""),
            ("androidx.compose.material3", "material3:1.2.1", ""),
        ],
        android=True,
    )


def library(ctx: GenerationContext) -> None:
    package = _package(ctx)
    if _kotlin(ctx):
        main, test = _source_paths(ctx, "Library")
        ctx.write(main, ctx.render(LIBRARY_KT, package=package))
        ctx.write(test, ctx.render(LIBRARY_TEST_KT, package=package))
    else:
        class_name = pascal_case(ctx.slug)
        main, test = _source_paths(ctx, class_name)
        ctx.write(main, ctx.render(LIBRARY_JAVA, package=package, class_name=class_name))
        ctx.write(test, ctx.render(LIBRARY_TEST_JAVA, package=package, class_name=class_name))
    _build_files(ctx, [])


class JvmScaffold(LanguageScaffold):
    id = "scaffold-jvm"
    name = "JVM project"
    languages = (Language.JAVA, Language.KOTLIN)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.MOBILE: mobile,
        Archetype.LIBRARY: library,
    }
    fallback = library
