"""Logic fill: CRUD routes, CLI commands, UI components and HTTP middleware.

The base scaffold only ships a health endpoint or a hello command; these
strategies add a representative slice of application code on top of it.
Route fills pick their resource name from the run's RNG, so the same seed
always produces the same resource.
"""

from __future__ import annotations

from procgen.enrichment.enricher import EnrichmentContext, EnrichmentStrategy
from procgen.models import Archetype, EnrichmentFlags, Framework, Language, Stack

MODEL_NAMES = ("User", "Item", "Post", "Task", "Product", "Order")

NODE_LANGUAGES = (Language.TYPESCRIPT, Language.JAVASCRIPT)


def _ext(ctx: EnrichmentContext) -> str:
    return "ts" if ctx.stack.language is Language.TYPESCRIPT else "js"


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

EXPRESS_ROUTES = """\
import { Router } from "express";
{% if ts %}
import type { Request, Response } from "express";

export interface {{ model }} {
  id: string;
  name: string;
  createdAt: string;
}
{% endif %}

const router = Router();
const {{ plural }} = new Map{% if ts %}<string, {{ model }}>{% endif %}();
let nextId = 1;

router.get("/{{ plural }}", (_req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}) => {
  const items = Array.from({{ plural }}.values());
  res.json({ data: items, total: items.length });
});

router.get("/{{ plural }}/:id", (req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}) => {
  const item = {{ plural }}.get(req.params.id);
  if (!item) {
    return res.status(404).json({ error: "{{ model }} not found" });
  }
  return res.json({ data: item });
});

router.post("/{{ plural }}", (req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}) => {
  const { name } = req.body ?? {};
  if (typeof name !== "string" || name.length === 0) {
    return res.status(400).json({ error: "name is required" });
  }
  const item = { id: String(nextId++), name, createdAt: new Date().toISOString() };
  {{ plural }}.set(item.id, item);
  return res.status(201).json({ data: item });
});

router.delete("/{{ plural }}/:id", (req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}) => {
  if (!{{ plural }}.delete(req.params.id)) {
    return res.status(404).json({ error: "{{ model }} not found" });
  }
  return res.status(204).send();
});

export default router;
"""

FASTIFY_ROUTES = """\
{% if ts %}
import type { FastifyInstance } from "fastify";

interface {{ model }} {
  id: string;
  name: string;
  createdAt: string;
}
{% endif %}

const {{ plural }} = new Map{% if ts %}<string, {{ model }}>{% endif %}();
let nextId = 1;

export default async function {{ plural }}Routes(app{% if ts %}: FastifyInstance{% endif %}) {
  app.get("/{{ plural }}", async () => {
    const items = Array.from({{ plural }}.values());
    return { data: items, total: items.length };
  });

  app.get("/{{ plural }}/:id", async (req{% if ts %}: any{% endif %}, reply) => {
    const item = {{ plural }}.get(req.params.id);
    if (!item) {
      return reply.code(404).send({ error: "{{ model }} not found" });
    }
    return { data: item };
  });

  app.post("/{{ plural }}", async (req{% if ts %}: any{% endif %}, reply) => {
    const name = req.body?.name;
    if (typeof name !== "string" || name.length === 0) {
      return reply.code(400).send({ error: "name is required" });
    }
    const item = { id: String(nextId++), name, createdAt: new Date().toISOString() };
    {{ plural }}.set(item.id, item);
    return reply.code(201).send({ data: item });
  });
}
"""

NEST_CONTROLLER = """\
import { Body, Controller, Get, HttpCode, NotFoundException, Param, Post } from "@nestjs/common";

interface {{ model }} {
  id: string;
  name: string;
}

@Controller("{{ plural }}")
export class {{ model }}sController {
  private readonly items = new Map<string, {{ model }}>();
  private nextId = 1;

  @Get()
  findAll() {
    return { data: Array.from(this.items.values()) };
  }

  @Get(":id")
  findOne(@Param("id") id: string) {
    const item = this.items.get(id);
    if (!item) {
      throw new NotFoundException("{{ model }} not found");
    }
    return { data: item };
  }

  @Post()
  @HttpCode(201)
  create(@Body() body: { name: string }) {
    const item = { id: String(this.nextId++), name: body.name };
    this.items.set(item.id, item);
    return { data: item };
  }
}
"""

FASTAPI_ROUTES = """\
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

router = APIRouter(prefix="/{{ plural }}", tags=["{{ plural }}"])


class {{ model }}In(BaseModel):
    name: str


class {{ model }}({{ model }}In):
    id: int


_{{ plural }}: dict[int, {{ model }}] = {}


@router.get("")
def list_{{ plural }}() -> dict:
    items = list(_{{ plural }}.values())
    return {"data": items, "total": len(items)}


@router.get("/{item_id}")
def get_{{ singular }}(item_id: int) -> {{ model }}:
    if item_id not in _{{ plural }}:
        raise HTTPException(status_code=404, detail="{{ model }} not found")
    return _{{ plural }}[item_id]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_{{ singular }}(payload: {{ model }}In) -> {{ model }}:
    item = {{ model }}(id=len(_{{ plural }}) + 1, name=payload.name)
    _{{ plural }}[item.id] = item
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_{{ singular }}(item_id: int) -> None:
    if _{{ plural }}.pop(item_id, None) is None:
        raise HTTPException(status_code=404, detail="{{ model }} not found")
"""

FLASK_ROUTES = """\
from flask import Blueprint, abort, jsonify, request

bp = Blueprint("{{ plural }}", __name__, url_prefix="/{{ plural }}")

_{{ plural }}: dict[int, dict] = {}


@bp.get("")
def list_{{ plural }}():
    items = list(_{{ plural }}.values())
    return jsonify(data=items, total=len(items))


@bp.get("/<int:item_id>")
def get_{{ singular }}(item_id: int):
    if item_id not in _{{ plural }}:
        abort(404, description="{{ model }} not found")
    return jsonify(data=_{{ plural }}[item_id])


@bp.post("")
def create_{{ singular }}():
    payload = request.get_json(silent=True) or {}
    if not payload.get("name"):
        abort(400, description="name is required")
    item = {"id": len(_{{ plural }}) + 1, "name": payload["name"]}
    _{{ plural }}[item["id"]] = item
    return jsonify(data=item), 201
"""

DJANGO_VIEWS = """\
import json

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

_{{ plural }}: dict[int, dict] = {}


@csrf_exempt
@require_http_methods(["GET", "POST"])
def {{ plural }}(request: HttpRequest) -> JsonResponse:
    if request.method == "POST":
        payload = json.loads(request.body or b"{}")
        if not payload.get("name"):
            return JsonResponse({"error": "name is required"}, status=400)
        item = {"id": len(_{{ plural }}) + 1, "name": payload["name"]}
        _{{ plural }}[item["id"]] = item
        return JsonResponse({"data": item}, status=201)
    items = list(_{{ plural }}.values())
    return JsonResponse({"data": items, "total": len(items)})


@require_http_methods(["GET"])
def {{ singular }}_detail(request: HttpRequest, item_id: int) -> JsonResponse:
    item = _{{ plural }}.get(item_id)
    if item is None:
        return JsonResponse({"error": "{{ model }} not found"}, status=404)
    return JsonResponse({"data": item})
"""

GIN_HANDLERS = """\
package handlers

import (
	"net/http"
	"strconv"
	"sync"

	"github.com/gin-gonic/gin"
)

type {{ model }} struct {
	ID   int    `json:"id"`
	Name string `json:"name" binding:"required"`
}

type {{ model }}Store struct {
	mu     sync.RWMutex
	items  map[int]{{ model }}
	nextID int
}

func New{{ model }}Store() *{{ model }}Store {
	return &{{ model }}Store{items: map[int]{{ model }}{}, nextID: 1}
}

func (s *{{ model }}Store) Register(r gin.IRouter) {
	r.GET("/{{ plural }}", s.list)
	r.GET("/{{ plural }}/:id", s.get)
	r.POST("/{{ plural }}", s.create)
}

func (s *{{ model }}Store) list(c *gin.Context) {
	s.mu.RLock()
	defer s.mu.RUnlock()
	items := make([]{{ model }}, 0, len(s.items))
	for _, item := range s.items {
		items = append(items, item)
	}
	c.JSON(http.StatusOK, gin.H{"data": items, "total": len(items)})
}

func (s *{{ model }}Store) get(c *gin.Context) {
	id, err := strconv.Atoi(c.Param("id"))
	if err != nil {
		c.JSON(http.StatusBadRequest, gin.H{"error": "invalid id"})
		return
	}
	s.mu.RLock()
	item, ok := s.items[id]
	s.mu.RUnlock()
	if !ok {
		c.JSON(http.StatusNotFound, gin.H{"error": "{{ model }} not found"})
		return
	}
	c.JSON(http.StatusOK, gin.H{"data": item})
}

func (s *{{ model }}Store) create(c *gin.Context) {
	var item {{ model }}
	if err := c.ShouldBindJSON(&item); err != nil {
		c.JSON(http.StatusBadRequest, gin.H{"error": err.Error()})
		return
	}
	s.mu.Lock()
	item.ID = s.nextID
	s.nextID++
	s.items[item.ID] = item
	s.mu.Unlock()
	c.JSON(http.StatusCreated, gin.H{"data": item})
}
"""

ECHO_HANDLERS = """\
package handlers

import (
	"net/http"
	"strconv"
	"sync"

	"github.com/labstack/echo/v4"
)

type {{ model }} struct {
	ID   int    `json:"id"`
	Name string `json:"name"`
}

type {{ model }}Store struct {
	mu     sync.RWMutex
	items  map[int]{{ model }}
	nextID int
}

func New{{ model }}Store() *{{ model }}Store {
	return &{{ model }}Store{items: map[int]{{ model }}{}, nextID: 1}
}

func (s *{{ model }}Store) Register(e *echo.Echo) {
	e.GET("/{{ plural }}", s.list)
	e.GET("/{{ plural }}/:id", s.get)
	e.POST("/{{ plural }}", s.create)
}

func (s *{{ model }}Store) list(c echo.Context) error {
	s.mu.RLock()
	defer s.mu.RUnlock()
	items := make([]{{ model }}, 0, len(s.items))
	for _, item := range s.items {
		items = append(items, item)
	}
	return c.JSON(http.StatusOK, map[string]any{"data": items, "total": len(items)})
}

func (s *{{ model }}Store) get(c echo.Context) error {
	id, err := strconv.Atoi(c.Param("id"))
	if err != nil {
		return echo.NewHTTPError(http.StatusBadRequest, "invalid id")
	}
	s.mu.RLock()
	item, ok := s.items[id]
	s.mu.RUnlock()
	if !ok {
		return echo.NewHTTPError(http.StatusNotFound, "{{ model }} not found")
	}
	return c.JSON(http.StatusOK, map[string]any{"data": item})
}

func (s *{{ model }}Store) create(c echo.Context) error {
	var item {{ model }}
	if err := c.Bind(&item); err != nil || item.Name == "" {
		return echo.NewHTTPError(http.StatusBadRequest, "name is required")
	}
	s.mu.Lock()
	item.ID = s.nextID
	s.nextID++
	s.items[item.ID] = item
	s.mu.Unlock()
	return c.JSON(http.StatusCreated, map[string]any{"data": item})
}
"""

AXUM_ROUTES = """\
use std::collections::HashMap;
use std::sync::{Arc, Mutex};

use axum::extract::{Path, State};
use axum::http::StatusCode;
use axum::routing::get;
use axum::{Json, Router};
use serde::{Deserialize, Serialize};

#[derive(Clone, Serialize)]
pub struct {{ model }} {
    pub id: u64,
    pub name: String,
}

#[derive(Deserialize)]
pub struct New{{ model }} {
    pub name: String,
}

#[derive(Clone, Default)]
pub struct Store {
    items: Arc<Mutex<HashMap<u64, {{ model }}>>>,
}

pub fn router() -> Router {
    Router::new()
        .route("/{{ plural }}", get(list).post(create))
        .route("/{{ plural }}/:id", get(fetch))
        .with_state(Store::default())
}

async fn list(State(store): State<Store>) -> Json<Vec<{{ model }}>> {
    Json(store.items.lock().unwrap().values().cloned().collect())
}

async fn fetch(State(store): State<Store>, Path(id): Path<u64>) -> Result<Json<{{ model }}>, StatusCode> {
    store.items.lock().unwrap().get(&id).cloned().map(Json).ok_or(StatusCode::NOT_FOUND)
}

async fn create(State(store): State<Store>, Json(input): Json<New{{ model }}>) -> (StatusCode, Json<{{ model }}>) {
    let mut items = store.items.lock().unwrap();
    let item = {{ model }} { id: items.len() as u64 + 1, name: input.name };
    items.insert(item.id, item.clone());
    (StatusCode::CREATED, Json(item))
}
"""

ACTIX_ROUTES = """\
use std::collections::HashMap;
use std::sync::Mutex;

use actix_web::{get, post, web, HttpResponse, Responder};
use serde::{Deserialize, Serialize};

#[derive(Clone, Serialize)]
pub struct {{ model }} {
    pub id: u64,
    pub name: String,
}

#[derive(Deserialize)]
pub struct New{{ model }} {
    pub name: String,
}

#[derive(Default)]
pub struct Store {
    items: Mutex<HashMap<u64, {{ model }}>>,
}

pub fn configure(cfg: &mut web::ServiceConfig) {
    cfg.app_data(web::Data::new(Store::default()))
        .service(list)
        .service(fetch)
        .service(create);
}

#[get("/{{ plural }}")]
async fn list(store: web::Data<Store>) -> impl Responder {
    let items: Vec<{{ model }}> = store.items.lock().unwrap().values().cloned().collect();
    HttpResponse::Ok().json(items)
}

#[get("/{{ plural }}/{id}")]
async fn fetch(store: web::Data<Store>, id: web::Path<u64>) -> impl Responder {
    match store.items.lock().unwrap().get(&id.into_inner()) {
        Some(item) => HttpResponse::Ok().json(item),
        None => HttpResponse::NotFound().finish(),
    }
}

#[post("/{{ plural }}")]
async fn create(store: web::Data<Store>, input: web::Json<New{{ model }}>) -> impl Responder {
    let mut items = store.items.lock().unwrap();
    let item = {{ model }} { id: items.len() as u64 + 1, name: input.into_inner().name };
    items.insert(item.id, item.clone());
    HttpResponse::Created().json(item)
}
"""


class ApiRoutesEnrichStrategy(EnrichmentStrategy):
    """Adds an in-memory CRUD resource next to the health endpoint."""

    id = "enrich-api-routes"
    name = "API route logic"
    priority = 20

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.fill_logic and stack.archetype is Archetype.BACKEND

    async def apply(self, ctx: EnrichmentContext) -> None:
        model = ctx.rng.pick(MODEL_NAMES)
        names = {"model": model, "singular": model.lower(), "plural": f"{model.lower()}s"}
        plural = names["plural"]
        language = ctx.stack.language
        framework = ctx.stack.framework

        if language in NODE_LANGUAGES:
            ext = _ext(ctx)
            if framework is Framework.NESTJS:
                ctx.write(f"src/{plural}/{plural}.controller.ts", ctx.render(NEST_CONTROLLER, **names))
            elif framework is Framework.FASTIFY:
                ctx.write(f"src/routes/{plural}.{ext}", ctx.render(FASTIFY_ROUTES, **names))
            else:
                ctx.write(f"src/routes/{plural}.{ext}", ctx.render(EXPRESS_ROUTES, **names))
        elif language is Language.PYTHON:
            pkg = f"src/{ctx.identifier}"
            if framework is Framework.DJANGO:
                ctx.write(f"{pkg}/views/{plural}.py", ctx.render(DJANGO_VIEWS, **names))
                ctx.write_if_absent(f"{pkg}/views/__init__.py", "")
            else:
                template = FLASK_ROUTES if framework is Framework.FLASK else FASTAPI_ROUTES
                ctx.write(f"{pkg}/routes/{plural}.py", ctx.render(template, **names))
                ctx.write_if_absent(f"{pkg}/routes/__init__.py", "")
        elif language is Language.GO:
            template = ECHO_HANDLERS if framework is Framework.ECHO else GIN_HANDLERS
            ctx.write(f"internal/handlers/{plural}.go", ctx.render(template, **names))
        elif language is Language.RUST:
            template = ACTIX_ROUTES if framework is Framework.ACTIX else AXUM_ROUTES
            ctx.write(f"src/routes/{plural}.rs", ctx.render(template, **names))
            ctx.append_once("src/routes/mod.rs", f"pub mod {plural};\n")


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------

NODE_COMMANDS = """\
{% if ts %}
export interface Command {
  name: string;
  description: string;
  run(args: string[]): Promise<number> | number;
}

{% endif %}
export const commands{% if ts %}: Command[]{% endif %} = [
  {
    name: "init",
    description: "Create a {{ slug }} configuration file",
    run: () => {
      console.log("Wrote {{ slug }}.config.json");
      return 0;
    },
  },
  {
    name: "status",
    description: "Show the current configuration",
    run: () => {
      console.log(JSON.stringify({ name: "{{ slug }}", ready: true }, null, 2));
      return 0;
    },
  },
];

export function findCommand(name{% if ts %}: string{% endif %}) {
  return commands.find((command) => command.name === name);
}
"""

PYTHON_COMMANDS = """\
\"\"\"Subcommands for {{ project_name }}.\"\"\"

import json
from pathlib import Path

CONFIG_FILE = Path("{{ slug }}.json")


def init(force: bool = False) -> int:
    \"\"\"Write a default configuration file.\"\"\"
    if CONFIG_FILE.exists() and not force:
        print(f"{CONFIG_FILE} already exists")
        return 1
    CONFIG_FILE.write_text(json.dumps({"name": "{{ slug }}"}, indent=2) + "\\n")
    print(f"Wrote {CONFIG_FILE}")
    return 0


def status() -> int:
    \"\"\"Print the active configuration.\"\"\"
    if not CONFIG_FILE.exists():
        print("not initialised")
        return 1
    print(CONFIG_FILE.read_text())
    return 0


COMMANDS = {"init": init, "status": status}
"""

COBRA_VERSION = """\
package cmd

import (
	"fmt"

	"github.com/spf13/cobra"
)

var Version = "0.1.0"

var versionCmd = &cobra.Command{
	Use:   "version",
	Short: "Print the {{ slug }} version",
	Run: func(cmd *cobra.Command, args []string) {
		fmt.Fprintln(cmd.OutOrStdout(), Version)
	},
}

func init() {
	rootCmd.AddCommand(versionCmd)
}
"""

CLAP_COMMANDS = """\
use clap::Subcommand;

#[derive(Subcommand, Debug)]
pub enum Command {
    /// Create a default configuration file
    Init {
        #[arg(long)]
        force: bool,
    },
    /// Show the current configuration
    Status,
}

pub fn run(command: &Command) -> i32 {
    match command {
        Command::Init { force } => {
            println!("init (force = {})", force);
            0
        }
        Command::Status => {
            println!("{{ slug }} is ready");
            0
        }
    }
}
"""


class CliCommandsEnrichStrategy(EnrichmentStrategy):
    id = "enrich-cli-commands"
    name = "CLI subcommands"
    priority = 20

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.fill_logic and stack.archetype is Archetype.CLI

    async def apply(self, ctx: EnrichmentContext) -> None:
        language = ctx.stack.language
        if language in NODE_LANGUAGES:
            ctx.write(f"src/commands/index.{_ext(ctx)}", ctx.render(NODE_COMMANDS))
        elif language is Language.PYTHON:
            ctx.write(f"src/{ctx.identifier}/commands.py", ctx.render(PYTHON_COMMANDS))
        elif language is Language.GO:
            ctx.write("cmd/version.go", ctx.render(COBRA_VERSION))
        elif language is Language.RUST:
            ctx.write("src/commands.rs", ctx.render(CLAP_COMMANDS))


# ---------------------------------------------------------------------------
# Web components
# ---------------------------------------------------------------------------

REACT_COUNTER = """\
import { useState } from "react";

export function Counter({ initial = 0 }{% if ts %}: { initial?: number }{% endif %}) {
  const [count, setCount] = useState(initial);
  return (
    <div className="counter">
      <button onClick={() => setCount(count - 1)}>-</button>
      <span>{count}</span>
      <button onClick={() => setCount(count + 1)}>+</button>
    </div>
  );
}
"""

SOLID_COUNTER = """\
import { createSignal } from "solid-js";

export function Counter(props{% if ts %}: { initial?: number }{% endif %}) {
  const [count, setCount] = createSignal(props.initial ?? 0);
  return (
    <div class="counter">
      <button onClick={() => setCount(count() - 1)}>-</button>
      <span>{count()}</span>
      <button onClick={() => setCount(count() + 1)}>+</button>
    </div>
  );
}
"""

REACT_HEADER = """\
export function Header({ title }{% if ts %}: { title: string }{% endif %}) {
  return (
    <header className="header">
      <h1>{title}</h1>
    </header>
  );
}
"""

VUE_COUNTER = """\
<script setup{% if ts %} lang="ts"{% endif %}>
import { ref } from "vue";

const props = defineProps({ initial: { type: Number, default: 0 } });
const count = ref(props.initial);
</script>

<template>
  <div class="counter">
    <button @click="count--">-</button>
{% raw %}
    <span>{{ count }}</span>
{% endraw %}
    <button @click="count++">+</button>
  </div>
</template>
"""

VUE_HEADER = """\
<script setup{% if ts %} lang="ts"{% endif %}>
defineProps({ title: { type: String, required: true } });
</script>

<template>
  <header class="header">
{% raw %}
    <h1>{{ title }}</h1>
{% endraw %}
  </header>
</template>
"""

SVELTE_COUNTER = """\
<script{% if ts %} lang="ts"{% endif %}>
  export let initial = 0;
  let count = initial;
</script>

<div class="counter">
  <button on:click={() => (count -= 1)}>-</button>
  <span>{count}</span>
  <button on:click={() => (count += 1)}>+</button>
</div>
"""

SVELTE_HEADER = """\
<script{% if ts %} lang="ts"{% endif %}>
  export let title{% if ts %}: string{% endif %};
</script>

<header class="header">
  <h1>{title}</h1>
</header>
"""


class WebComponentsEnrichStrategy(EnrichmentStrategy):
    id = "enrich-web-components"
    name = "UI components"
    priority = 20

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.fill_logic and stack.archetype is Archetype.WEB

    async def apply(self, ctx: EnrichmentContext) -> None:
        framework = ctx.stack.framework
        jsx = "tsx" if ctx.stack.language is Language.TYPESCRIPT else "jsx"
        if framework in (Framework.REACT, Framework.NEXTJS):
            root = "components" if framework is Framework.NEXTJS else "src/components"
            ctx.write(f"{root}/Header.{jsx}", ctx.render(REACT_HEADER))
            ctx.write(f"{root}/Counter.{jsx}", ctx.render(REACT_COUNTER))
        elif framework is Framework.SOLID:
            ctx.write(f"src/components/Header.{jsx}", ctx.render(REACT_HEADER).replace("className=", "class="))
            ctx.write(f"src/components/Counter.{jsx}", ctx.render(SOLID_COUNTER))
        elif framework in (Framework.VUE, Framework.NUXT):
            root = "components" if framework is Framework.NUXT else "src/components"
            ctx.write(f"{root}/AppHeader.vue", ctx.render(VUE_HEADER))
            ctx.write(f"{root}/AppCounter.vue", ctx.render(VUE_COUNTER))
        elif framework in (Framework.SVELTE, Framework.SVELTEKIT):
            root = "src/lib/components" if framework is Framework.SVELTEKIT else "src/components"
            ctx.write(f"{root}/Header.svelte", ctx.render(SVELTE_HEADER))
            ctx.write(f"{root}/Counter.svelte", ctx.render(SVELTE_COUNTER))


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

EXPRESS_MIDDLEWARE = """\
{% if ts %}
import type { NextFunction, Request, Response } from "express";

{% endif %}
export function requestLogger(req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}, next{% if ts %}: NextFunction{% endif %}) {
  const started = Date.now();
  res.on("finish", () => {
    console.log(`${req.method} ${req.originalUrl} ${res.statusCode} ${Date.now() - started}ms`);
  });
  next();
}

export function notFound(_req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}) {
  res.status(404).json({ error: "Not found" });
}

export function errorHandler(err{% if ts %}: Error{% endif %}, _req{% if ts %}: Request{% endif %}, res{% if ts %}: Response{% endif %}, _next{% if ts %}: NextFunction{% endif %}) {
  console.error(err);
  res.status(500).json({ error: "Internal server error" });
}
"""

FASTIFY_MIDDLEWARE = """\
{% if ts %}
import type { FastifyInstance } from "fastify";

{% endif %}
export function registerHooks(app{% if ts %}: FastifyInstance{% endif %}) {
  app.addHook("onRequest", async (req) => {
    req.log.info({ url: req.url }, "incoming request");
  });

  app.setErrorHandler((error, _req, reply) => {
    reply.code(error.statusCode ?? 500).send({ error: error.message });
  });
}
"""

FASTAPI_MIDDLEWARE = """\
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("{{ ident }}")


def install(app: FastAPI) -> None:
    \"\"\"Attach request timing and a catch-all error handler.\"\"\"

    @app.middleware("http")
    async def timing(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        response.headers["X-Response-Time"] = f"{elapsed:.1f}ms"
        logger.info("%s %s %s", request.method, request.url.path, response.status_code)
        return response

    @app.exception_handler(Exception)
    async def unhandled(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)
"""

FLASK_MIDDLEWARE = """\
import logging
import time

from flask import Flask, g, jsonify, request

logger = logging.getLogger("{{ ident }}")


def install(app: Flask) -> None:
    \"\"\"Attach request timing and JSON error responses.\"\"\"

    @app.before_request
    def start_timer() -> None:
        g.started = time.perf_counter()

    @app.after_request
    def log_request(response):
        elapsed = (time.perf_counter() - g.started) * 1000
        response.headers["X-Response-Time"] = f"{elapsed:.1f}ms"
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify(error="Not found"), 404
"""

DJANGO_MIDDLEWARE = """\
import logging
import time

logger = logging.getLogger("{{ ident }}")


class TimingMiddleware:
    \"\"\"Adds an ``X-Response-Time`` header and logs each request.\"\"\"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed = (time.perf_counter() - started) * 1000
        response["X-Response-Time"] = f"{elapsed:.1f}ms"
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response
"""

GIN_MIDDLEWARE = """\
package middleware

import (
	"log"
	"net/http"
	"time"

	"github.com/gin-gonic/gin"
)

// Logger logs method, path, status and latency for every request.
func Logger() gin.HandlerFunc {
	return func(c *gin.Context) {
		started := time.Now()
		c.Next()
		log.Printf("%s %s %d %s", c.Request.Method, c.Request.URL.Path, c.Writer.Status(), time.Since(started))
	}
}

// Recover turns panics into 500 responses.
func Recover() gin.HandlerFunc {
	return gin.CustomRecovery(func(c *gin.Context, recovered any) {
		c.AbortWithStatusJSON(http.StatusInternalServerError, gin.H{"error": "internal server error"})
	})
}
"""

ECHO_MIDDLEWARE = """\
package middleware

import (
	"log"
	"time"

	"github.com/labstack/echo/v4"
)

// Logger logs method, path, status and latency for every request.
func Logger(next echo.HandlerFunc) echo.HandlerFunc {
	return func(c echo.Context) error {
		started := time.Now()
		err := next(c)
		log.Printf("%s %s %d %s", c.Request().Method, c.Path(), c.Response().Status, time.Since(started))
		return err
	}
}
"""


class MiddlewareEnrichStrategy(EnrichmentStrategy):
    id = "enrich-middleware"
    name = "HTTP middleware"
    priority = 22

    def matches(self, stack: Stack, flags: EnrichmentFlags) -> bool:
        return flags.fill_logic and stack.archetype is Archetype.BACKEND

    async def apply(self, ctx: EnrichmentContext) -> None:
        language = ctx.stack.language
        framework = ctx.stack.framework
        if language in NODE_LANGUAGES and framework is not Framework.NESTJS:
            template = FASTIFY_MIDDLEWARE if framework is Framework.FASTIFY else EXPRESS_MIDDLEWARE
            ctx.write(f"src/middleware/index.{_ext(ctx)}", ctx.render(template))
        elif language is Language.PYTHON:
            template = {
                Framework.FLASK: FLASK_MIDDLEWARE,
                Framework.DJANGO: DJANGO_MIDDLEWARE,
            }.get(framework, FASTAPI_MIDDLEWARE)
            ctx.write(f"src/{ctx.identifier}/middleware.py", ctx.render(template))
        elif language is Language.GO:
            template = ECHO_MIDDLEWARE if framework is Framework.ECHO else GIN_MIDDLEWARE
            ctx.write("internal/middleware/middleware.go", template)
