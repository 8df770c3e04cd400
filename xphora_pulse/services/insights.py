import structlog
from datetime import datetime, timezone
from typing import List

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ..config import Config
from ..engine import InsightsEngine
from ..errors import ReportConversionError
from ..models import AreaSummary, BufferStatus, Event, PredictiveInsight
from ..reports import CitizenReport, event_from_report

log = structlog.get_logger()


def _api_error(status_code: int, code: str, message: str, details=None) -> HTTPException:
    payload = {"code": code, "message": message}
    if details is not None:
        payload["details"] = details
    return HTTPException(status_code=status_code, detail=payload)


class InsightsService:
    """HTTP API for feeding events to an insights engine and reading its output."""

    def __init__(self, config: Config, engine: InsightsEngine):
        self.config = config
        self.engine = engine
        self.start_time = datetime.now(timezone.utc)
        self.app = self._build_app()

    def _build_app(self):
        app = FastAPI(title=f"{self.config.service_name} insights")

        @app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            if isinstance(exc.detail, dict) and "code" in exc.detail and "message" in exc.detail:
                payload = dict(exc.detail)
            else:
                payload = {"code": "HTTP_ERROR", "message": str(exc.detail)}
            return JSONResponse(status_code=exc.status_code, content=payload)

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(request: Request, exc: Exception):
            log.error("unhandled_exception", error=str(exc), path=str(request.url.path))
            return JSONResponse(
                status_code=500,
                content={"code": "INTERNAL_SERVER_ERROR", "message": "Unexpected server error"},
            )

        @app.get("/")
        async def root():
            return {"service": self.config.service_name}

        @app.get("/health")
        async def health():
            return {"status": "ok"}

        @app.post("/events")
        async def ingest_events(events: List[Event]):
            evicted = self.engine.ingest(events)
            return {
                "status": "accepted",
                "ingested": len(events),
                "evicted": evicted,
                "buffer_size": len(self.engine.buffer),
            }

        @app.post("/reports")
        async def submit_report(report: CitizenReport):
            """Convert a classified citizen report to an event and buffer it."""
            try:
                event = event_from_report(report)
            except ReportConversionError as e:
                log.info("report_rejected", report_id=report.id, category=e.category)
                raise _api_error(
                    422,
                    "UNSUPPORTED_CATEGORY",
                    str(e),
                    details={"category": e.category, "report_id": report.id},
                )

            self.engine.ingest([event])
            return {
                "status": "accepted",
                "event_id": event.id,
                "event_type": event.type.value,
                "buffer_size": len(self.engine.buffer),
            }

        @app.post("/analyze", response_model=List[PredictiveInsight])
        async def analyze(events: List[Event] = []):
            return await self.engine.analyze_event_streams(events)

        @app.get("/summaries", response_model=List[AreaSummary])
        async def summaries(area: List[str] = Query(default=[])):
            areas = area or self.config.default_areas
            if not areas:
                raise _api_error(400, "NO_AREAS", "Pass at least one ?area= or set DEFAULT_AREAS")
            return self.engine.generate_area_summaries(areas)

        @app.get("/buffer", response_model=BufferStatus)
        async def buffer_status():
            return self.engine.buffer.status()

        @app.get("/status")
        async def status():
            uptime = (datetime.now(timezone.utc) - self.start_time).total_seconds()
            return {
                "service": self.config.service_name,
                "buffer_size": len(self.engine.buffer),
                "buffer_capacity": self.engine.buffer.capacity,
                "uptime_seconds": uptime,
            }

        return app
