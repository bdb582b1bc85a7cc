from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from notecalc.core import csrf
from notecalc.core.templating import render
from notecalc.domain.calculators import Calculator
from notecalc.domain.validation import (
    GENERIC_ERROR,
    ValidationFailure,
    parse_int,
    validate_calculator,
    validate_calculator_fields,
)
from notecalc.repositories.json_storage import CollectionStore

router = APIRouter(prefix="/calculators", tags=["calculators"])

INDEX_URL = "/calculators"
_EMPTY_VALUES = {"oid": "", "manufacturer": "", "grade": "", "batteryType": ""}


def _get_calculator_manager(request: Request) -> CollectionStore[Calculator, int]:
    manager = getattr(getattr(request.app, "state", None), "calculator_manager", None)
    if manager is None:
        raise RuntimeError("CalculatorManager not configured")
    return manager


def _values_from(calculator: Calculator) -> Dict[str, str]:
    return {
        "oid": str(calculator.oid),
        "manufacturer": calculator.manufacturer,
        "grade": str(calculator.grade),
        "batteryType": str(calculator.battery_type),
    }


def _render_form(
    request: Request,
    *,
    mode: str,
    action: str,
    values: Optional[Dict[str, str]] = None,
    error: str | None = None,
    status_code: int = 200,
):
    resolved = dict(_EMPTY_VALUES)
    resolved.update(values or {})
    return render(
        request,
        "calculators/form.html",
        {
            "title": "Add Calculator" if mode == "Add" else "Edit Calculator",
            "mode": mode,
            "action": action,
            "values": resolved,
            "is_edit": mode == "Edit",
            "error": error,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
def calculators_index(request: Request):
    calculators = _get_calculator_manager(request).list()
    return render(
        request,
        "calculators/index.html",
        {
            "title": "Calculators",
            "calculators": calculators,
            "has_calculators": bool(calculators),
        },
    )


@router.get("/create", response_class=HTMLResponse)
def calculators_create(request: Request):
    return _render_form(request, mode="Add", action="/calculators/create")


@router.post("/create")
def calculators_create_submit(
    request: Request,
    oid: str = Form(""),
    manufacturer: str = Form(""),
    grade: str = Form(""),
    batteryType: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    result = validate_calculator(oid, manufacturer, grade, batteryType)
    if isinstance(result, ValidationFailure):
        return _render_form(
            request,
            mode="Add",
            action="/calculators/create",
            values=result.values,
            error=result.error,
            status_code=400,
        )
    stored = _get_calculator_manager(request).add(result)
    if stored is None:
        return _render_form(
            request,
            mode="Add",
            action="/calculators/create",
            values=_values_from(result),
            error=GENERIC_ERROR,
            status_code=409,
        )
    return RedirectResponse(INDEX_URL, status_code=303)


@router.get("/edit/{oid}", response_class=HTMLResponse)
def calculators_edit(request: Request, oid: str):
    parsed_oid = parse_int(oid)
    if parsed_oid is None:
        return RedirectResponse(INDEX_URL, status_code=303)
    selected = _get_calculator_manager(request).get(parsed_oid)
    if selected is None:
        return RedirectResponse(INDEX_URL, status_code=303)
    return _render_form(
        request,
        mode="Edit",
        action=f"/calculators/edit/{parsed_oid}",
        values=_values_from(selected),
    )


@router.post("/edit/{oid}")
def calculators_edit_submit(
    request: Request,
    oid: str,
    manufacturer: str = Form(""),
    grade: str = Form(""),
    batteryType: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    parsed_oid = parse_int(oid)
    if parsed_oid is None:
        return RedirectResponse(INDEX_URL, status_code=303)
    manager = _get_calculator_manager(request)
    fields = validate_calculator_fields(manufacturer, grade, batteryType)
    if isinstance(fields, ValidationFailure):
        if manager.get(parsed_oid) is None:
            return RedirectResponse(INDEX_URL, status_code=303)
        return _render_form(
            request,
            mode="Edit",
            action=f"/calculators/edit/{parsed_oid}",
            values={"oid": str(parsed_oid), **fields.values},
            error=fields.error,
            status_code=400,
        )
    manager.update(parsed_oid, fields)
    return RedirectResponse(INDEX_URL, status_code=303)


@router.post("/delete/{oid}")
def calculators_delete(request: Request, oid: str, csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    parsed_oid = parse_int(oid)
    if parsed_oid is not None:
        _get_calculator_manager(request).delete(parsed_oid)
    return RedirectResponse(INDEX_URL, status_code=303)
