from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from deficit_api.schemas import FilterChangeModel, MetaCommandsResponse, MetaSubUnitsResponse, ViewParametersModel
from deficit_core.data import load_deficit_data
from deficit_core.filters import ALL, CategoryFilter, ViewParameters, normalize_view_params, resolve_sub_unit, sub_unit_options
from deficit_core.metrics_deficit import compute_deficit, view_to_frame
from deficit_core.view import apply_filter_changes, build_view, toggle_sort


app = FastAPI(title="Deficit Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _params_from_model(model: ViewParametersModel, frame: pd.DataFrame) -> ViewParameters:
    params = normalize_view_params(model.model_dump())
    return replace(params, sub_unit_filter=resolve_sub_unit(frame, params.command_filter, params.sub_unit_filter))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


@app.get("/meta/commands")
def meta_commands():
    try:
        data_ctx = load_deficit_data()
        return _json(MetaCommandsResponse(commands=list(data_ctx.get("commands", []))))
    except Exception as exc:
        logger.exception("meta_commands failed")
        return _error(exc)


@app.get("/meta/sub-units")
def meta_sub_units(command_filter: str = Query(default=ALL)):
    try:
        data_ctx = load_deficit_data()
        command_filter = (command_filter or "").strip() or ALL
        return _json(MetaSubUnitsResponse(sub_units=sub_unit_options(data_ctx["frame"], command_filter)))
    except Exception as exc:
        logger.exception("meta_sub_units failed")
        return _error(exc)


@app.get("/meta/categories")
def meta_categories():
    return _json({"categories": [c.value for c in CategoryFilter]})


@app.post("/deficit")
def deficit(params: ViewParametersModel):
    try:
        data_ctx = load_deficit_data()
        p = _params_from_model(params, data_ctx["frame"])
        return _json(compute_deficit(p, data_ctx))
    except Exception as exc:
        logger.exception("deficit failed")
        return _error(exc)


@app.post("/deficit/sort")
def deficit_sort(params: ViewParametersModel, header: str = Query(...)):
    try:
        data_ctx = load_deficit_data()
        p = toggle_sort(_params_from_model(params, data_ctx["frame"]), header)
        return _json(compute_deficit(p, data_ctx))
    except Exception as exc:
        logger.exception("deficit_sort failed")
        return _error(exc)


@app.post("/deficit/filters")
def deficit_filters(change: FilterChangeModel):
    try:
        data_ctx = load_deficit_data()
        frame = data_ctx["frame"]
        p = apply_filter_changes(
            frame,
            _params_from_model(change.params, frame),
            command_filter=change.command_filter,
            sub_unit_filter=change.sub_unit_filter,
            category_filter=change.category_filter,
        )
        return _json(compute_deficit(p, data_ctx))
    except Exception as exc:
        logger.exception("deficit_filters failed")
        return _error(exc)


@app.post("/export/deficit")
def export_deficit(params: ViewParametersModel):
    data_ctx = load_deficit_data()
    p = _params_from_model(params, data_ctx["frame"])
    export_df = view_to_frame(build_view(data_ctx["frame"], p))
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=deficit.csv"},
    )
