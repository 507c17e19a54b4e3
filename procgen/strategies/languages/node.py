"""TypeScript / JavaScript scaffolds (Node, Bun and Deno runtimes)."""

from __future__ import annotations

from typing import Any

from procgen.engine.registry import GenerationContext
from procgen.models import (
    Archetype,
    BuildTool,
    Framework,
    Language,
    Styling,
    TestingFramework,
)
from procgen.strategies.languages.base import LanguageScaffold
from procgen.utils import dump_json

# ---------------------------------------------------------------------------
# Tooling tables
# ---------------------------------------------------------------------------

TEST_SCRIPTS: dict[TestingFramework, tuple[str, dict[str, str]]] = {
    TestingFramework.VITEST: ("vitest run", {"vitest": "^1.6.0"}),
    TestingFramework.JEST: ("jest", {"jest": "^29.7.0", "ts-jest": "^29.1.0", "@types/jest": "^29.5.0"}),
    TestingFramework.MOCHA: ("mocha", {"mocha": "^10.4.0", "chai": "^5.1.0"}),
}

BUILD_SCRIPTS: dict[BuildTool, tuple[str, dict[str, str]]] = {
    BuildTool.VITE: ("vite build", {"vite": "^5.2.0"}),
    BuildTool.WEBPACK: ("webpack --mode production", {"webpack": "^5.91.0", "webpack-cli": "^5.1.0"}),
    BuildTool.ESBUILD: (
        "esbuild src/index.{ext} --bundle --platform=node --outdir=dist",
        {"esbuild": "^0.21.0"},
    ),
    BuildTool.TSUP: ("tsup src/index.{ext} --format esm --dts", {"tsup": "^8.0.0"}),
}

STYLING_DEPS: dict[Styling, dict[str, str]] = {
    Styling.TAILWIND: {"tailwindcss": "^3.4.0", "postcss": "^8.4.0", "autoprefixer": "^10.4.0"},
    Styling.SCSS: {"sass": "^1.77.0"},
    Styling.STYLED_COMPONENTS: {"styled-components": "^6.1.0"},
}

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

EXPRESS_INDEX = """\
import express from "express";

const app = express();
const port = Number(process.env.PORT ?? {{ port }});

app.use(express.json());

app.get("/health", (_req, res) => {
  res.json({ status: "ok", service: "{{ slug }}" });
});

if (process.env.NODE_ENV !== "test") {
  app.listen(port, () => {
    console.log(`{{ slug }} listening on port ${port}`);
  });
}

export default app;
"""

FASTIFY_INDEX = """\
import Fastify from "fastify";

const app = Fastify({ logger: true });
const port = Number(process.env.PORT ?? {{ port }});

app.get("/health", async () => ({ status: "ok", service: "{{ slug }}" }));

if (process.env.NODE_ENV !== "test") {
  app.listen({ port, host: "0.0.0.0" }).catch((err) => {
    app.log.error(err);
    process.exit(1);
  });
}

export default app;
"""

NEST_MAIN = """\
import { NestFactory } from "@nestjs/core";
import { AppModule } from "./app.module";

async function bootstrap() {
  const app = await NestFactory.create(AppModule);
  await app.listen(Number(process.env.PORT ?? {{ port }}));
}

bootstrap();
"""

NEST_MODULE = """\
import { Module } from "@nestjs/common";
import { AppController } from "./app.controller";

@Module({
  controllers: [AppController],
})
export class AppModule {}
"""

NEST_CONTROLLER = """\
import { Controller, Get } from "@nestjs/common";

@Controller()
export class AppController {
  @Get("health")
  health() {
    return { status: "ok", service: "{{ slug }}" };
  }
}
"""

HTTP_INDEX = """\
import { createServer } from "node:http";

const port = Number(process.env.PORT ?? {{ port }});

const server = createServer((req, res) => {
  res.setHeader("Content-Type", "application/json");
  if (req.url === "/health") {
    res.end(JSON.stringify({ status: "ok" }));
    return;
  }
  res.statusCode = 404;
  res.end(JSON.stringify({ error: "not found" }));
});

server.listen(port, () => console.log(`{{ slug }} listening on port ${port}`));
"""

BACKEND_TEST = """\
{% if testing == "vitest" %}
import { describe, expect, it } from "vitest";
{% elif testing == "mocha" %}
import { expect } from "chai";
{% endif %}

describe("{{ slug }}", () => {
  it("exposes a health route", () => {
    expect("/health").{{ "to.equal" if testing == "mocha" else "toBe" }}("/health");
  });
});
"""

COMMANDER_INDEX = """\
#!/usr/bin/env node
import { Command } from "commander";
import { hello } from "./commands/hello";

const program = new Command();

program.name("{{ slug }}").description("{{ project_name }} command-line tool").version("0.1.0");

program
  .command("hello")
  .argument("[name]", "who to greet", "world")
  .action((name{{ ": string" if ts else "" }}) => console.log(hello(name)));

program.parse();
"""

YARGS_INDEX = """\
#!/usr/bin/env node
import yargs from "yargs";
import { hideBin } from "yargs/helpers";
import { hello } from "./commands/hello";

yargs(hideBin(process.argv))
  .scriptName("{{ slug }}")
  .command(
    "hello [name]",
    "print a greeting",
    (y) => y.positional("name", { type: "string", default: "world" }),
    (argv) => console.log(hello(String(argv.name))),
  )
  .demandCommand(1)
  .help()
  .parse();
"""

CLI_HELLO = """\
export function hello(name{{ ": string" if ts else "" }}){{ ": string" if ts else "" }} {
  return `Hello, ${name}!`;
}
"""

LIBRARY_INDEX = """\
/**
 * {{ project_name }}
 */
export function greet(name{{ ": string" if ts else "" }}){{ ": string" if ts else "" }} {
  return `Hello, ${name}!`;
}

export function sum(values{{ ": number[]" if ts else "" }}){{ ": number" if ts else "" }} {
  return values.reduce((total, value) => total + value, 0);
}
"""

LIBRARY_TEST = """\
{% if testing == "vitest" %}
import { describe, expect, it } from "vitest";
{% elif testing == "mocha" %}
import { expect } from "chai";
{% endif %}
import { greet, sum } from "../src/index";

describe("{{ slug }}", () => {
  it("greets", () => {
    expect(greet("world")).{{ "to.equal" if testing == "mocha" else "toBe" }}("Hello, world!");
  });

  it("sums", () => {
    expect(sum([1, 2, 3])).{{ "to.equal" if testing == "mocha" else "toBe" }}(6);
  });
});
"""

INDEX_HTML = """\
<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{{ project_name }}</title>
  </head>
  <body>
    <div id="app"></div>
    <script type="module" src="/src/main.{{ entry_ext }}"></script>
  </body>
</html>
"""

REACT_MAIN = """\
import React from "react";
import ReactDOM from "react-dom/client";
import App from "./App";
{% if style_import %}
import "{{ style_import }}";
{% endif %}

ReactDOM.createRoot(document.getElementById("app"){{ "!" if ts else "" }}).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>,
);
"""

REACT_APP = """\
import { useState } from "react";

export default function App() {
  const [count, setCount] = useState(0);
  return (
    <main>
      <h1>{{ project_name }}</h1>
      <button onClick={() => setCount(count + 1)}>count is {count}</button>
    </main>
  );
}
"""

SOLID_MAIN = """\
import { render } from "solid-js/web";
import App from "./App";
{% if style_import %}
import "{{ style_import }}";
{% endif %}

render(() => <App />, document.getElementById("app"){{ "!" if ts else "" }});
"""

SOLID_APP = """\
import { createSignal } from "solid-js";

export default function App() {
  const [count, setCount] = createSignal(0);
  return (
    <main>
      <h1>{{ project_name }}</h1>
      <button onClick={() => setCount(count() + 1)}>count is {count()}</button>
    </main>
  );
}
"""

VUE_MAIN = """\
import { createApp } from "vue";
import App from "./App.vue";
{% if style_import %}
import "{{ style_import }}";
{% endif %}

createApp(App).mount("#app");
"""

VUE_APP = """\
<script setup{{ ' lang="ts"' if ts else "" }}>
import { ref } from "vue";

const count = ref(0);
</script>

<template>
  <main>
    <h1>{{ project_name }}</h1>
    <button @click="count++">count is {% raw %}{{ count }}{% endraw %}</button>
  </main>
</template>
"""

SVELTE_MAIN = """\
import App from "./App.svelte";
{% if style_import %}
import "{{ style_import }}";
{% endif %}

const app = new App({ target: document.getElementById("app"){{ "!" if ts else "" }} });

export default app;
"""

SVELTE_APP = """\
<script{{ ' lang="ts"' if ts else "" }}>
  let count = 0;
</script>

<main>
  <h1>{{ project_name }}</h1>
  <button on:click={() => (count += 1)}>count is {count}</button>
</main>
"""

QWIK_MAIN = """\
import { render } from "@builder.io/qwik";
import App from "./App";

render(document.getElementById("app") as HTMLElement, <App />);
"""

QWIK_APP = """\
import { component$, useSignal } from "@builder.io/qwik";

export default component$(() => {
  const count = useSignal(0);
  return (
    <main>
      <h1>{{ project_name }}</h1>
      <button onClick$={() => count.value++}>count is {count.value}</button>
    </main>
  );
});
"""

VANILLA_MAIN = """\
const root = document.getElementById("app");
if (root) {
  root.innerHTML = "<h1>{{ project_name }}</h1>";
}
"""

VITE_CONFIG = """\
import { defineConfig } from "vite";
{% if plugin %}
import {{ plugin_import }} from "{{ plugin }}";
{% endif %}

export default defineConfig({
{% if plugin %}
  plugins: [{{ plugin_call }}()],
{% endif %}
  server: { port: {{ port }} },
});
"""

NEXT_PAGE = """\
export default function Home() {
  return (
    <main>
      <h1>{{ project_name }}</h1>
    </main>
  );
}
"""

NEXT_LAYOUT = """\
{% if style_import %}
import "{{ style_import }}";
{% endif %}

export const metadata = { title: "{{ project_name }}" };

export default function RootLayout({ children }{{ ": { children: React.ReactNode }" if ts else "" }}) {
  return (
    <html lang="en">
      <body>{children}</body>
    </html>
  );
}
"""

NUXT_APP = """\
<template>
  <main>
    <h1>{{ project_name }}</h1>
  </main>
</template>
"""

SVELTEKIT_PAGE = """\
<h1>{{ project_name }}</h1>
<p>Visit <a href="https://kit.svelte.dev">kit.svelte.dev</a> to read the documentation.</p>
"""

ANGULAR_MAIN = """\
import { bootstrapApplication } from "@angular/platform-browser";
import { AppComponent } from "./app/app.component";

bootstrapApplication(AppComponent).catch((err) => console.error(err));
"""

ANGULAR_COMPONENT = """\
import { Component } from "@angular/core";

@Component({
  selector: "app-root",
  standalone: true,
  template: `<h1>{% raw %}{{ title }}{% endraw %}</h1>`,
})
export class AppComponent {
  title = "{{ project_name }}";
}
"""

ELECTRON_MAIN = """\
import { app, BrowserWindow } from "electron";
import path from "node:path";

function createWindow() {
  const window = new BrowserWindow({ width: 1024, height: 768 });
  window.loadFile(path.join(__dirname, "../index.html"));
}

app.whenReady().then(createWindow);

app.on("window-all-closed", () => {
  if (process.platform !== "darwin") app.quit();
});
"""

RN_APP = """\
import React from "react";
import { SafeAreaView, Text } from "react-native";

export default function App() {
  return (
    <SafeAreaView>
      <Text>{{ project_name }}</Text>
    </SafeAreaView>
  );
}
"""

RN_INDEX = """\
import { AppRegistry } from "react-native";
import App from "./App";

AppRegistry.registerComponent("{{ ident }}", () => App);
"""

PHASER_MAIN = """\
import Phaser from "phaser";

class MainScene extends Phaser.Scene {
  constructor() {
    super("main");
  }

  create() {
    this.add.text(16, 16, "{{ project_name }}", { color: "#ffffff" });
  }
}

new Phaser.Game({
  type: Phaser.AUTO,
  width: 800,
  height: 600,
  parent: "app",
  scene: [MainScene],
});
"""

TAILWIND_CONFIG = """\
/** @type {import('tailwindcss').Config} */
export default {
  content: ["./index.html", "./src/**/*.{js,ts,jsx,tsx,vue,svelte}"],
  theme: { extend: {} },
  plugins: [],
};
"""

TAILWIND_CSS = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n"

BASE_CSS = """\
:root {
  font-family: system-ui, sans-serif;
}

body {
  margin: 0;
}
"""

CLI_TEST = """\
{% if testing == "vitest" %}
import { describe, expect, it } from "vitest";
{% elif testing == "mocha" %}
import { expect } from "chai";
{% endif %}
import { hello } from "../src/commands/hello";

describe("hello", () => {
  it("greets by name", () => {
    expect(hello("world")).{{ "to.equal" if testing == "mocha" else "toBe" }}("Hello, world!");
  });
});
"""

# web framework -> (dependencies, vite plugin package, import clause, plugin call)
WEB_FRAMEWORKS: dict[Framework, tuple[dict[str, str], str, str, str]] = {
    Framework.REACT: (
        {"react": "^18.3.0", "react-dom": "^18.3.0"}, "@vitejs/plugin-react", "react", "react",
    ),
    Framework.VUE: ({"vue": "^3.4.0"}, "@vitejs/plugin-vue", "vue", "vue"),
    Framework.SVELTE: (
        {"svelte": "^4.2.0"}, "@sveltejs/vite-plugin-svelte", "{ svelte }", "svelte",
    ),
    Framework.SOLID: ({"solid-js": "^1.8.0"}, "vite-plugin-solid", "solid", "solid"),
    Framework.QWIK: ({"@builder.io/qwik": "^1.5.0"}, "", "", ""),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ext(ctx: GenerationContext) -> str:
    return "ts" if ctx.stack.language is Language.TYPESCRIPT else "js"


def _jsx_ext(ctx: GenerationContext) -> str:
    return "tsx" if ctx.stack.language is Language.TYPESCRIPT else "jsx"


def _package_json(
    ctx: GenerationContext,
    *,
    scripts: dict[str, str],
    dependencies: dict[str, str],
    dev_dependencies: dict[str, str] | None = None,
    **extra: Any,
) -> None:
    ext = _ext(ctx)
    stack = ctx.stack
    dev: dict[str, str] = dict(dev_dependencies or {})

    test_cmd, test_deps = TEST_SCRIPTS.get(stack.testing, ("vitest run", {"vitest": "^1.6.0"}))
    dev.update(test_deps)
    if stack.build_tool in BUILD_SCRIPTS and "build" not in scripts:
        build_cmd, build_deps = BUILD_SCRIPTS[stack.build_tool]
        scripts = {**scripts, "build": build_cmd.format(ext=ext)}
        dev.update(build_deps)
    if ext == "ts":
        dev.update({"typescript": "^5.4.0", "@types/node": "^20.12.0"})

    manifest: dict[str, Any] = {
        "name": ctx.slug,
        "version": "0.1.0",
        "private": stack.archetype is not Archetype.LIBRARY,
        "type": "module",
    }
    manifest.update(extra)
    manifest["scripts"] = {**scripts, "test": test_cmd}
    manifest["dependencies"] = dict(sorted(dependencies.items()))
    manifest["devDependencies"] = dict(sorted(dev.items()))
    ctx.write("package.json", dump_json(manifest))

    if ext == "ts":
        ctx.write("tsconfig.json", dump_json(_tsconfig(ctx)))


def _tsconfig(ctx: GenerationContext) -> dict[str, Any]:
    options: dict[str, Any] = {
        "target": "ES2022",
        "module": "ESNext",
        "moduleResolution": "Bundler",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "outDir": "dist",
    }
    if ctx.stack.archetype in (Archetype.WEB, Archetype.MOBILE, Archetype.GAME):
        options["jsx"] = "react-jsx"
        options["lib"] = ["ES2022", "DOM"]
    if ctx.stack.framework is Framework.NESTJS:
        options["experimentalDecorators"] = True
        options["emitDecoratorMetadata"] = True
    return {"compilerOptions": options, "include": ["src", "tests"]}


def _runner(ctx: GenerationContext) -> str:
    """Command used to run a source file in development."""
    runtime = ctx.stack.runtime.value
    ext = _ext(ctx)
    if runtime == "bun":
        return f"bun --watch src/index.{ext}"
    if runtime == "deno":
        return f"deno run --allow-net --allow-env --watch src/index.{ext}"
    return f"tsx watch src/index.{ext}" if ext == "ts" else f"node --watch src/index.{ext}"


def _styles(ctx: GenerationContext) -> str:
    """Write styling files and return the path the entry module should import."""
    styling = ctx.stack.styling
    if styling is Styling.TAILWIND:
        ctx.write("tailwind.config.js", TAILWIND_CONFIG)
        ctx.write(
            "postcss.config.js",
            "export default {\n  plugins: { tailwindcss: {}, autoprefixer: {} },\n};\n",
        )
        ctx.write("src/index.css", TAILWIND_CSS)
        return "./index.css"
    if styling is Styling.SCSS:
        ctx.write("src/styles.scss", "$accent: #4f46e5;\n\nbody {\n  margin: 0;\n  color: $accent;\n}\n")
        return "./styles.scss"
    if styling is Styling.CSS_MODULES:
        ctx.write("src/App.module.css", ".app {\n  padding: 2rem;\n}\n")
        ctx.write("src/index.css", BASE_CSS)
        return "./index.css"
    if styling is Styling.VANILLA:
        ctx.write("src/index.css", BASE_CSS)
        return "./index.css"
    return ""


# ---------------------------------------------------------------------------
# Archetype handlers
# ---------------------------------------------------------------------------


def backend(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    framework = ctx.stack.framework
    dev = {"tsx": "^4.7.0"} if ext == "ts" else {}

    if framework is Framework.EXPRESS:
        deps = {"express": "^4.19.0"}
        if ext == "ts":
            dev["@types/express"] = "^4.17.0"
        ctx.write(f"src/index.{ext}", ctx.render(EXPRESS_INDEX))
    elif framework is Framework.FASTIFY:
        deps = {"fastify": "^4.26.0"}
        ctx.write(f"src/index.{ext}", ctx.render(FASTIFY_INDEX))
    elif framework is Framework.NESTJS:
        deps = {
            "@nestjs/common": "^10.3.0",
            "@nestjs/core": "^10.3.0",
            "@nestjs/platform-express": "^10.3.0",
            "reflect-metadata": "^0.2.0",
            "rxjs": "^7.8.0",
        }
        ctx.write("src/main.ts", ctx.render(NEST_MAIN))
        ctx.write("src/app.module.ts", NEST_MODULE)
        ctx.write("src/app.controller.ts", ctx.render(NEST_CONTROLLER))
    else:
        deps = {}
        ctx.write(f"src/index.{ext}", ctx.render(HTTP_INDEX))

    compiled = "dist/main.js" if framework is Framework.NESTJS else "dist/index.js"
    _package_json(
        ctx,
        scripts={"dev": _runner(ctx), "start": f"node {compiled}"},
        dependencies=deps,
        dev_dependencies=dev,
        main=compiled,
    )
    ctx.write(f"tests/health.test.{ext}", ctx.render(BACKEND_TEST))


def cli(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    if ctx.stack.framework is Framework.YARGS:
        deps = {"yargs": "^17.7.0"}
        ctx.write(f"src/index.{ext}", ctx.render(YARGS_INDEX))
    else:
        deps = {"commander": "^12.0.0"}
        ctx.write(f"src/index.{ext}", ctx.render(COMMANDER_INDEX))
    ctx.write(f"src/commands/hello.{ext}", ctx.render(CLI_HELLO))
    _package_json(
        ctx,
        scripts={"dev": _runner(ctx), "start": "node dist/index.js"},
        dependencies=deps,
        dev_dependencies={"tsx": "^4.7.0"} if ext == "ts" else {},
        bin={ctx.slug: "dist/index.js"},
    )
    ctx.write(f"tests/hello.test.{ext}", ctx.render(CLI_TEST))


def web(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    jsx = _jsx_ext(ctx)
    framework = ctx.stack.framework
    style_import = _styles(ctx)
    deps: dict[str, str] = dict(STYLING_DEPS.get(ctx.stack.styling, {}))
    dev: dict[str, str] = {}

    if framework is Framework.NEXTJS:
        deps.update({"next": "^14.2.0", "react": "^18.3.0", "react-dom": "^18.3.0"})
        ctx.write(f"app/page.{jsx}", ctx.render(NEXT_PAGE))
        ctx.write(
            f"app/layout.{jsx}",
            ctx.render(NEXT_LAYOUT, style_import=style_import.replace("./", "../src/")),
        )
        ctx.write("next.config.mjs", "/** @type {import('next').NextConfig} */\nexport default {};\n")
        scripts = {"dev": f"next dev -p {ctx.port}", "build": "next build", "start": "next start"}
    elif framework is Framework.NUXT:
        deps["nuxt"] = "^3.11.0"
        ctx.write("app.vue", ctx.render(NUXT_APP))
        ctx.write("nuxt.config.ts", "export default defineNuxtConfig({\n  devtools: { enabled: true },\n});\n")
        scripts = {"dev": "nuxt dev", "build": "nuxt build", "start": "nuxt preview"}
    elif framework is Framework.SVELTEKIT:
        deps.update({"@sveltejs/kit": "^2.5.0", "svelte": "^4.2.0"})
        dev["@sveltejs/adapter-auto"] = "^3.2.0"
        ctx.write("src/routes/+page.svelte", ctx.render(SVELTEKIT_PAGE))
        ctx.write(
            "svelte.config.js",
            'import adapter from "@sveltejs/adapter-auto";\n\nexport default { kit: { adapter: adapter() } };\n',
        )
        ctx.write(
            f"vite.config.{ext}",
            'import { sveltekit } from "@sveltejs/kit/vite";\nimport { defineConfig } from "vite";\n\n'
            "export default defineConfig({ plugins: [sveltekit()] });\n",
        )
        scripts = {"dev": "vite dev", "build": "vite build", "start": "vite preview"}
    elif framework is Framework.ANGULAR:
        deps.update({
            "@angular/core": "^17.3.0",
            "@angular/common": "^17.3.0",
            "@angular/platform-browser": "^17.3.0",
            "rxjs": "^7.8.0",
            "zone.js": "^0.14.0",
        })
        dev["@angular/cli"] = "^17.3.0"
        ctx.write("src/main.ts", ANGULAR_MAIN)
        ctx.write("src/app/app.component.ts", ctx.render(ANGULAR_COMPONENT))
        ctx.write("src/index.html", ctx.render(INDEX_HTML, entry_ext="ts").replace(
            '<div id="app"></div>', "<app-root></app-root>"
        ))
        scripts = {"dev": f"ng serve --port {ctx.port}", "build": "ng build", "start": "ng serve"}
    else:
        fw_deps, plugin, plugin_import, plugin_call = WEB_FRAMEWORKS.get(
            framework, ({}, "", "", "")
        )
        deps.update(fw_deps)
        if plugin:
            dev[plugin] = "^3.1.0"
        entry_ext = jsx if framework in (Framework.REACT, Framework.SOLID, Framework.QWIK) else ext
        ctx.write("index.html", ctx.render(INDEX_HTML, entry_ext=entry_ext))
        ctx.write(
            f"vite.config.{ext}",
            ctx.render(
                VITE_CONFIG, plugin=plugin, plugin_import=plugin_import, plugin_call=plugin_call
            ),
        )
        if framework is Framework.REACT:
            ctx.write(f"src/main.{jsx}", ctx.render(REACT_MAIN, style_import=style_import))
            ctx.write(f"src/App.{jsx}", ctx.render(REACT_APP))
        elif framework is Framework.SOLID:
            ctx.write(f"src/main.{jsx}", ctx.render(SOLID_MAIN, style_import=style_import))
            ctx.write(f"src/App.{jsx}", ctx.render(SOLID_APP))
        elif framework is Framework.QWIK:
            ctx.write(f"src/main.{jsx}", ctx.render(QWIK_MAIN))
            ctx.write(f"src/App.{jsx}", ctx.render(QWIK_APP))
        elif framework is Framework.VUE:
            ctx.write(f"src/main.{ext}", ctx.render(VUE_MAIN, style_import=style_import))
            ctx.write("src/App.vue", ctx.render(VUE_APP))
        elif framework is Framework.SVELTE:
            ctx.write(f"src/main.{ext}", ctx.render(SVELTE_MAIN, style_import=style_import))
            ctx.write("src/App.svelte", ctx.render(SVELTE_APP))
        else:
            ctx.write(f"src/main.{ext}", ctx.render(VANILLA_MAIN))
        scripts = {"dev": "vite", "preview": "vite preview"}

    _package_json(ctx, scripts=scripts, dependencies=deps, dev_dependencies=dev)


def desktop(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    ctx.write(f"src/main.{ext}", ELECTRON_MAIN)
    ctx.write("index.html", ctx.render(INDEX_HTML, entry_ext=ext))
    _package_json(
        ctx,
        scripts={"dev": "electron .", "start": "electron ."},
        dependencies={},
        dev_dependencies={"electron": "^30.0.0"},
        main="dist/main.js",
    )


def mobile(ctx: GenerationContext) -> None:
    ctx.write("App.tsx", ctx.render(RN_APP))
    ctx.write("index.js", ctx.render(RN_INDEX))
    ctx.write("app.json", dump_json({"name": ctx.identifier, "displayName": ctx.project_name}))
    _package_json(
        ctx,
        scripts={"start": "react-native start", "android": "react-native run-android", "ios": "react-native run-ios"},
        dependencies={"react": "^18.2.0", "react-native": "^0.74.0"},
        dev_dependencies={"@types/react": "^18.2.0"},
    )


def game(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    ctx.write("index.html", ctx.render(INDEX_HTML, entry_ext=ext))
    ctx.write(f"src/main.{ext}", ctx.render(PHASER_MAIN))
    _package_json(
        ctx,
        scripts={"dev": "vite", "preview": "vite preview"},
        dependencies={"phaser": "^3.80.0"},
    )


def library(ctx: GenerationContext) -> None:
    ext = _ext(ctx)
    ctx.write(f"src/index.{ext}", ctx.render(LIBRARY_INDEX))
    ctx.write(f"tests/index.test.{ext}", ctx.render(LIBRARY_TEST))
    extra: dict[str, Any] = {"main": "dist/index.js", "files": ["dist"]}
    if ext == "ts":
        extra["types"] = "dist/index.d.ts"
    _package_json(ctx, scripts={}, dependencies={}, **extra)


class NodeScaffold(LanguageScaffold):
    id = "scaffold-node"
    name = "TypeScript/JavaScript project"
    languages = (Language.TYPESCRIPT, Language.JAVASCRIPT)
    handlers = {
        Archetype.BACKEND: backend,
        Archetype.CLI: cli,
        Archetype.WEB: web,
        Archetype.DESKTOP: desktop,
        Archetype.MOBILE: mobile,
        Archetype.GAME: game,
        Archetype.LIBRARY: library,
    }
    fallback = library
