from tide_events.routes.tide_events import router as tide_events_router

__all__ = ["tide_events_router"]
