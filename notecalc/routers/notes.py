from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from notecalc.core import csrf
from notecalc.core.templating import render
from notecalc.domain.notes import Note
from notecalc.domain.validation import ValidationFailure, validate_note, validate_note_body
from notecalc.repositories.json_storage import CollectionStore

router = APIRouter(prefix="/notes", tags=["notes"])

INDEX_URL = "/notes/index"
DUPLICATE_ERROR = "A note with that title already exists."


def _get_note_manager(request: Request) -> CollectionStore[Note, str]:
    manager = getattr(getattr(request.app, "state", None), "note_manager", None)
    if manager is None:
        raise RuntimeError("NoteManager not configured")
    return manager


def _update_action(title: str) -> str:
    return f"/notes/update/{quote(title, safe='')}"


def _render_form(
    request: Request,
    *,
    mode: str,
    action: str,
    title: str = "",
    body: str = "",
    error: str | None = None,
    status_code: int = 200,
):
    return render(
        request,
        "notes/form.html",
        {
            "title": "Add Note" if mode == "Add" else "Edit Note",
            "mode": mode,
            "action": action,
            "note_title": title,
            "note_body": body,
            "is_edit": mode == "Edit",
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/index", response_class=HTMLResponse)
def notes_index(request: Request):
    notes = [
        {"title": note.title, "body": note.body, "encoded_title": quote(note.title, safe="")}
        for note in _get_note_manager(request).list()
    ]
    return render(
        request,
        "notes/index.html",
        {"title": "Notes", "notes": notes, "has_notes": bool(notes)},
    )


@router.get("/create", response_class=HTMLResponse)
def notes_create(request: Request):
    return _render_form(request, mode="Add", action="/notes/create")


@router.post("/create")
def notes_create_submit(
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    result = validate_note(title, body)
    if isinstance(result, ValidationFailure):
        return _render_form(
            request,
            mode="Add",
            action="/notes/create",
            title=result.values["title"],
            body=result.values["body"],
            error=result.error,
            status_code=400,
        )
    stored = _get_note_manager(request).add(result)
    if stored is None:
        return _render_form(
            request,
            mode="Add",
            action="/notes/create",
            title=title,
            body=body,
            error=DUPLICATE_ERROR,
            status_code=409,
        )
    return RedirectResponse(INDEX_URL, status_code=303)


@router.get("/update/{title:path}", response_class=HTMLResponse)
def notes_update(request: Request, title: str):
    selected = _get_note_manager(request).get(title)
    if selected is None:
        return RedirectResponse(INDEX_URL, status_code=303)
    return _render_form(
        request,
        mode="Edit",
        action=_update_action(title),
        title=selected.title,
        body=selected.body,
    )


@router.post("/update/{title:path}")
def notes_update_submit(
    request: Request,
    title: str,
    body: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    manager = _get_note_manager(request)
    result = validate_note_body(body)
    if isinstance(result, ValidationFailure):
        if manager.get(title) is None:
            return RedirectResponse(INDEX_URL, status_code=303)
        return _render_form(
            request,
            mode="Edit",
            action=_update_action(title),
            title=title,
            body=result.values["body"],
            error=result.error,
            status_code=400,
        )
    # a note deleted in the meantime just sends the user back to the list
    manager.update(title, {"body": result})
    return RedirectResponse(INDEX_URL, status_code=303)


@router.post("/delete/{title:path}")
def notes_delete(request: Request, title: str, csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    _get_note_manager(request).delete(title)
    return RedirectResponse(INDEX_URL, status_code=303)
