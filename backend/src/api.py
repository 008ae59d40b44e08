import logging
import os
from typing import List, Optional

import sentry_sdk
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError
from sentry_sdk.integrations.aws_lambda import AwsLambdaIntegration

from linking.analyze import Analyzer, analyze
from report import Fight, Source

logging.basicConfig(level=os.environ.get("LINKING_LOG_LEVEL", "INFO").upper())

SENTRY_DSN = os.environ.get("SENTRY_DSN")
SENTRY_ENABLED = SENTRY_DSN is not None
if SENTRY_ENABLED:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        traces_sample_rate=0.05,
        attach_stacktrace=True,
        integrations=[AwsLambdaIntegration()],
    )
app = FastAPI()


async def catch_exceptions_middleware(request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logging.exception(e)
        return Response("Internal server error", status_code=500)


# Add this middleware first so 500 errors have CORS headers
app.middleware("http")(catch_exceptions_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.environ.get(
            "LINKING_CORS_ORIGINS", "http://localhost:5173"
        ).split(",")
        if origin.strip()
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)


class LinkRequest(BaseModel):
    events: List[dict]
    source_id: int
    source_name: str = ""
    pets: List[int] = []
    combatant_info: dict = {}
    spec: str = "Restoration"
    encounter: Optional[str] = None


class LinkResponse(BaseModel):
    data: dict


def _describe_link(link):
    return {
        "link_relation": link.link_relation,
        "reverse_link_relation": link.reverse_link_relation,
        "linking_event_id": list(link.linking_event_id),
        "linking_event_type": [t.value for t in link.linking_event_type],
        "referenced_event_id": list(link.referenced_event_id),
        "referenced_event_type": [t.value for t in link.referenced_event_type],
        "forward_buffer_ms": link.forward_buffer_ms,
        "backward_buffer_ms": link.backward_buffer_ms,
        "any_target": link.any_target,
        "maximum_links": link.maximum_links
        if not callable(link.maximum_links)
        else "dynamic",
        "has_condition": link.additional_condition is not None,
        "is_gated": link.is_active is not None,
    }


@app.get("/link_rules")
async def link_rules(response: Response, spec: str = "Restoration"):
    normalizer_cls = Analyzer.LINK_CONFIGS.get(spec)
    if normalizer_cls is None:
        response.status_code = 400
        return {"error": f"Unknown spec {spec!r}"}

    response.headers["Cache-Control"] = "max-age=86400"
    return {"data": [_describe_link(link) for link in normalizer_cls.EVENT_LINKS]}


@app.post("/link_events", response_model=LinkResponse)
async def link_events(request: LinkRequest, response: Response):
    if request.spec not in Analyzer.LINK_CONFIGS:
        response.status_code = 400
        return {"data": {"error": f"Unknown spec {request.spec!r}"}}

    try:
        fight = Fight(
            request.events,
            Source(request.source_id, request.source_name, request.pets),
            combatant_info=request.combatant_info,
            encounter_name=request.encounter,
        )
    except ValidationError as e:
        response.status_code = 422
        return {
            "data": {
                "error": "Invalid events",
                "details": e.errors(include_url=False, include_context=False),
            }
        }
    logging.info(
        f"Linking {len(fight.events)} events for source {request.source_id} "
        f"({request.spec})"
    )

    response.headers["Cache-Control"] = "no-cache"
    return {"data": analyze(fight, request.spec)}
