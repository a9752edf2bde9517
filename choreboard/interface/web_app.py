"""Mini README: FastAPI-powered household service for ChoreBoard.

Structure:
    * create_application - application factory wiring storage, ledger and routes.
    * require_session / require_admin - dependencies enforcing the session boundary.

Routes return JSON for a browser front end. Requests without a signed-in
member receive 401 and members without the admin flag receive 403 on the
management routes. Ledger operations that had no effect answer 200 with a
``false`` flag, because the ledger reports no-ops rather than errors.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import Body, Depends, FastAPI, Form, HTTPException, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..configuration import get_settings
from ..export import EXPORT_CONTENT_TYPE, EXPORT_FILENAME, LedgerExporter
from ..household import Chore, Expense, HouseholdLedger, SessionHolder, User
from ..household.models import utc_now
from ..logging_utils import get_logger
from ..storage import STORAGE_BACKENDS, KeyValueStore

LOGGER = get_logger(__name__)


def create_application(
    store: Optional[KeyValueStore] = None,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    if store is None:
        settings = get_settings()
        store = STORAGE_BACKENDS.create(settings.storage_backend, directory=settings.data_directory)

    app = FastAPI(title="ChoreBoard", version="0.1.0")
    ledger = HouseholdLedger(store, clock=clock)
    session = SessionHolder(store, ledger)
    exporter = LedgerExporter(store)
    LOGGER.info("ChoreBoard application created with %s", store.metadata())

    def require_session() -> User:
        """Re-read persisted state and return the acting member."""

        user = session.current_user()
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in to continue")
        ledger.reload()
        return user

    def require_admin(user: User = Depends(require_session)) -> User:
        if not user.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin roommates only")
        return user

    def chore_view(chore: Chore) -> Dict[str, Any]:
        payload = chore.as_dict()
        payload["assignedToName"] = ledger.display_name(chore.assigned_to, chore.assigned_to_name)
        return payload

    def expense_view(expense: Expense) -> Dict[str, Any]:
        payload = expense.as_dict()
        payload["paidByName"] = ledger.display_name(expense.paid_by, expense.paid_by_name)
        return payload

    @app.post("/login")
    async def login(
        email: str = Form(""),
        name: str = Form(""),
        is_admin: bool = Form(False),
    ) -> JSONResponse:
        """Sign in, registering the member and seeding the ledger on first use."""

        ledger.reload()
        user = session.login(email, name=name, is_admin=is_admin, now=clock())
        if user is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")
        return JSONResponse({"user": user.as_dict()})

    @app.post("/logout")
    async def logout() -> JSONResponse:
        session.logout()
        return JSONResponse({"logged_out": True})

    @app.get("/session")
    async def current_session(user: User = Depends(require_session)) -> JSONResponse:
        return JSONResponse({"user": user.as_dict()})

    @app.get("/dashboard")
    async def dashboard(user: User = Depends(require_session)) -> JSONResponse:
        """Summary figures, notifications and recent activity for the member."""

        summary = ledger.dashboard_summary(user, now=clock())
        LOGGER.debug(
            "Dashboard for %s -> chores: %s completion: %.1f%% notifications: %s",
            user.id,
            summary["my_chore_count"],
            summary["completion_rate_percent"],
            len(summary["notifications"]),
        )
        return JSONResponse(summary)

    @app.get("/chores")
    async def list_chores(user: User = Depends(require_session)) -> JSONResponse:
        chores = ledger.visible_chores(user)
        return JSONResponse(
            {
                "chores": [chore_view(chore) for chore in chores],
                "pending_count": sum(1 for chore in chores if chore.is_pending),
                "completed_count": sum(1 for chore in chores if not chore.is_pending),
            }
        )

    @app.post("/chores")
    async def create_chore(
        name: str = Form(""),
        description: str = Form(""),
        assigned_to: str = Form(""),
        due_date: str = Form(""),
        user: User = Depends(require_admin),
    ) -> JSONResponse:
        chore = ledger.create_chore(name, description, assigned_to, due_date, user)
        return JSONResponse(
            {"created": chore is not None, "chore": chore_view(chore) if chore else None}
        )

    @app.post("/chores/{chore_id}/complete")
    async def complete_chore(chore_id: str, user: User = Depends(require_session)) -> JSONResponse:
        """Only the assignee may mark a chore as done."""

        chore = ledger.get_chore(chore_id)
        if chore is not None and chore.assigned_to != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the assigned roommate can complete this chore",
            )
        return JSONResponse({"completed": ledger.complete_chore(chore_id)})

    @app.delete("/chores/{chore_id}")
    async def delete_chore(chore_id: str, user: User = Depends(require_admin)) -> JSONResponse:
        return JSONResponse({"deleted": ledger.delete_chore(chore_id)})

    @app.get("/expenses")
    async def list_expenses(user: User = Depends(require_session)) -> JSONResponse:
        total = ledger.total_approved()
        return JSONResponse(
            {
                "expenses": [expense_view(expense) for expense in ledger.expenses],
                "pending": (
                    [expense_view(expense) for expense in ledger.pending_expenses()]
                    if user.is_admin
                    else []
                ),
                "total_approved": total,
                "monthly_approved_total": ledger.monthly_approved_total(clock()),
                "my_share": ledger.my_share(total, len(ledger.users)),
                "roommate_count": len(ledger.users),
            }
        )

    @app.post("/expenses")
    async def create_expense(
        amount: str = Form(""),
        description: str = Form(""),
        category: str = Form(""),
        user: User = Depends(require_session),
    ) -> JSONResponse:
        payer = ledger.get_user(user.id) or user
        expense = ledger.create_expense(amount, description, category, payer)
        return JSONResponse(
            {"created": expense is not None, "expense": expense_view(expense) if expense else None}
        )

    @app.post("/expenses/{expense_id}/approve")
    async def approve_expense(expense_id: str, user: User = Depends(require_admin)) -> JSONResponse:
        return JSONResponse({"approved": ledger.approve_expense(expense_id)})

    @app.post("/expenses/{expense_id}/reject")
    async def reject_expense(expense_id: str, user: User = Depends(require_admin)) -> JSONResponse:
        return JSONResponse({"rejected": ledger.reject_expense(expense_id)})

    @app.get("/roommates")
    async def list_roommates(user: User = Depends(require_session)) -> JSONResponse:
        return JSONResponse({"roommates": [member.as_dict() for member in ledger.users]})

    @app.post("/roommates")
    async def invite_roommate(email: str = Form(""), user: User = Depends(require_admin)) -> JSONResponse:
        roommate = ledger.invite_roommate(email)
        return JSONResponse(
            {"created": roommate is not None, "roommate": roommate.as_dict() if roommate else None}
        )

    @app.delete("/roommates/{user_id}")
    async def remove_roommate(user_id: str, user: User = Depends(require_admin)) -> JSONResponse:
        return JSONResponse({"removed": ledger.remove_roommate(user_id, user)})

    @app.get("/settings")
    async def read_settings(user: User = Depends(require_admin)) -> JSONResponse:
        return JSONResponse(ledger.settings.as_dict())

    @app.patch("/settings")
    async def update_settings(
        partial: Dict[str, Any] = Body(...),
        user: User = Depends(require_admin),
    ) -> JSONResponse:
        try:
            updated = ledger.update_settings(partial)
        except ValidationError as error:
            raise HTTPException(
                status_code=422,
                detail=str(error),
            ) from error
        return JSONResponse(updated.as_dict())

    @app.get("/export")
    async def export_data(user: User = Depends(require_admin)) -> Response:
        """Download the stored ledger as ``choreboard-data.json``."""

        payload = exporter.payload()
        if payload is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No household data stored")
        LOGGER.info("Exporting household ledger for %s", user.id)
        return Response(
            content=payload,
            media_type=EXPORT_CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    return app
