"""
Shared FastAPI dependencies for the booking and admin routers.
"""

from fastapi import HTTPException, Request, status

from services.calendar_clock import CalendarClock


def get_calendar_clock(request: Request) -> CalendarClock:
    """
    Get the process-wide calendar clock created at application startup.

    Tests override this dependency with a clock backed by a fake source.
    """
    clock = getattr(request.app.state, "calendar_clock", None)
    if clock is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Serviço de calendário indisponível"
        )
    return clock
