"""API contract files for non-REST transports (gRPC, GraphQL, tRPC, WebSocket)."""

from __future__ import annotations

from procgen.engine.registry import GenerationContext, GenerationStrategy
from procgen.matrices.languages import NODE_LANGUAGES
from procgen.models import Archetype, Language, Stack, Transport
from procgen.strategies.database import merge_package_json
from procgen.templates import pascal_case

PROTO = """\
syntax = "proto3";

package {{ ident }}.v1;

service {{ service }}Service {
  rpc Health(HealthRequest) returns (HealthResponse);
}

message HealthRequest {}

message HealthResponse {
  string status = 1;
  string service = 2;
}
"""

GRAPHQL_SCHEMA = """\
type Health {
  status: String!
  service: String!
}

type Query {
  health: Health!
}
"""

TRPC_ROUTER = """\
import { initTRPC } from "@trpc/server";

const t = initTRPC.create();

export const appRouter = t.router({
  health: t.procedure.query(() => ({ status: "ok", service: "{{ slug }}" })),
});

export type AppRouter = typeof appRouter;
"""

WS_SERVER = """\
import { WebSocketServer } from "ws";

const port = Number(process.env.WS_PORT ?? {{ ws_port }});
const wss = new WebSocketServer({ port });

wss.on("connection", (socket) => {
  socket.on("message", (data) => socket.send(data.toString()));
});

console.log(`WebSocket server listening on ${port}`);
"""


class TransportStrategy(GenerationStrategy):
    """Writes the contract for the service's transport."""

    id = "transport"
    name = "Transport contracts"
    priority = 30

    def matches(self, stack: Stack) -> bool:
        if stack.archetype is not Archetype.BACKEND:
            return False
        if stack.transport in (Transport.GRPC, Transport.GRAPHQL):
            return True
        return stack.transport in (Transport.TRPC, Transport.WEBSOCKET) and (
            stack.language in NODE_LANGUAGES
        )

    async def apply(self, ctx: GenerationContext) -> None:
        transport = ctx.stack.transport
        ext = "ts" if ctx.stack.language is Language.TYPESCRIPT else "js"
        if transport is Transport.GRPC:
            ctx.write(
                f"proto/{ctx.identifier}/v1/service.proto",
                ctx.render(PROTO, service=pascal_case(ctx.slug)),
            )
        elif transport is Transport.GRAPHQL:
            ctx.write("schema.graphql", GRAPHQL_SCHEMA)
        elif transport is Transport.TRPC:
            ctx.write(f"src/trpc/router.{ext}", ctx.render(TRPC_ROUTER))
            merge_package_json(ctx, {"@trpc/server": "^10.45.0", "zod": "^3.23.0"})
        else:
            ctx.write(f"src/ws.{ext}", ctx.render(WS_SERVER, ws_port=ctx.port + 1))
            merge_package_json(ctx, {"ws": "^8.17.0"})
