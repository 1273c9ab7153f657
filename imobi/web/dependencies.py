"""Web dependencies: app services, session view state and flash messages."""

from fastapi import Request

from imobi.schemas.dashboard import ViewState
from imobi.services.dashboard import DashboardController, Notice
from imobi.services.store import PropertyStore


def get_store(request: Request) -> PropertyStore:
    """Property store created at startup."""
    return request.app.state.store


def get_controller(request: Request) -> DashboardController:
    """Dashboard controller created at startup."""
    return request.app.state.controller


def get_view_state(request: Request) -> ViewState:
    """Dashboard view state stored in the session cookie."""
    return ViewState.from_session(request.session.get("view_state"))


def save_view_state(request: Request, view: ViewState) -> None:
    request.session["view_state"] = view.to_session()


def get_flash_messages(request: Request) -> list[dict]:
    """Get and clear flash messages from session."""
    messages = request.session.pop("flash_messages", [])
    return messages


def add_flash_message(request: Request, message: str, category: str = "info") -> None:
    """Add a flash message to the session."""
    if "flash_messages" not in request.session:
        request.session["flash_messages"] = []
    request.session["flash_messages"].append({"message": message, "category": category})


def flash_notices(request: Request, notices: tuple[Notice, ...]) -> None:
    for notice in notices:
        add_flash_message(request, notice.message, notice.category)
