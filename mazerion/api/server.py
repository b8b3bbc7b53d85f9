"""
FastAPI server for the Mazerion calculators.

Provides REST API endpoints and a small HTML UI.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from mazerion import __version__
from mazerion.config import load_settings
from mazerion.core.errors import CalcError, CalculatorNotFoundError
from mazerion.core.units import Unit
from mazerion.engine import CalcEngine
from mazerion.models.inputs import BatchRequest, CalcRequest
from mazerion.models.outputs import (
    BatchResponse,
    CalcResponse,
    CalculatorInfo,
    CategoryListing,
)

logger = logging.getLogger(__name__)

settings = load_settings()
engine = CalcEngine(settings=settings)

app = FastAPI(
    title="Mazerion API",
    description="""
    Brewing, mead-making and winemaking calculators.

    Every calculator takes named string parameters (and optional typed
    measurements) and returns a primary value with warnings and metadata.
    """,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


HTML_UI = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Mazerion</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            max-width: 900px;
            margin: 0 auto;
            padding: 20px;
            background: #f5f5f5;
            color: #333;
        }
        h1 { color: #6b3e1f; border-bottom: 3px solid #d4a017; padding-bottom: 10px; }
        .panel { background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px; }
        select, textarea { width: 100%; font-size: 14px; padding: 8px; margin-top: 8px; }
        textarea { height: 160px; font-family: 'Monaco', 'Menlo', monospace; }
        button {
            padding: 12px 24px; margin-top: 12px; border: none; border-radius: 4px;
            background: #d4a017; color: white; cursor: pointer;
        }
        .value { font-size: 28px; font-weight: bold; color: #27ae60; }
        .warning { background: #fff3cd; padding: 6px 10px; margin-top: 6px; border-radius: 4px; }
        .error { color: #e74c3c; }
        td { padding: 4px 12px 4px 0; vertical-align: top; }
        #description { color: #666; font-size: 13px; }
    </style>
</head>
<body>
    <h1>Mazerion</h1>
    <div class="panel">
        <label for="calculator">Calculator</label>
        <select id="calculator" onchange="showDescription()"></select>
        <div id="description"></div>
        <label for="params">Parameters (JSON)</label>
        <textarea id="params">{"og": "1.050", "fg": "1.010"}</textarea>
        <button onclick="calculate()">Calculate</button>
    </div>
    <div class="panel" id="result"></div>
    <script>
        let calculators = [];

        async function loadCalculators() {
            const response = await fetch('/calculators');
            calculators = await response.json();
            const select = document.getElementById('calculator');
            for (const calc of calculators) {
                const option = document.createElement('option');
                option.value = calc.id;
                option.textContent = calc.category + ' / ' + calc.name;
                select.appendChild(option);
            }
            showDescription();
        }

        function showDescription() {
            const id = document.getElementById('calculator').value;
            const calc = calculators.find(c => c.id === id);
            document.getElementById('description').textContent = calc ? calc.description : '';
        }

        async function calculate() {
            const out = document.getElementById('result');
            let params;
            try {
                params = JSON.parse(document.getElementById('params').value);
            } catch (e) {
                out.innerHTML = '<div class="error">Parameters are not valid JSON</div>';
                return;
            }
            const response = await fetch('/calculate', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({
                    calculator_id: document.getElementById('calculator').value,
                    params: params,
                }),
            });
            const data = await response.json();
            if (!response.ok) {
                const detail = data.detail.message || JSON.stringify(data.detail);
                out.innerHTML = '<div class="error">' + detail + '</div>';
                return;
            }
            let html = '<div class="value">' + data.display + '</div>';
            for (const w of data.warnings) {
                html += '<div class="warning">' + w + '</div>';
            }
            html += '<table>';
            for (const [key, value] of Object.entries(data.metadata)) {
                html += '<tr><td>' + key + '</td><td>' + value + '</td></tr>';
            }
            out.innerHTML = html + '</table>';
        }

        loadCalculators();
    </script>
</body>
</html>
"""


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    calculators: int


class UnitInfo(BaseModel):
    """One member of the closed unit set."""
    unit: str
    symbol: str
    precision: int


def get_engine() -> CalcEngine:
    return engine


def error_detail(e: CalcError) -> dict[str, str]:
    return {"message": e.message, "kind": e.kind}


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the HTML UI."""
    return HTML_UI


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(engine: CalcEngine = Depends(get_engine)):
    """Check if the API is running."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        calculators=engine.registry.count(),
    )


@app.get("/calculators", response_model=list[CalculatorInfo], tags=["Reference"])
async def list_calculators(
    category: Optional[str] = Query(default=None, description="Only this category"),
    engine: CalcEngine = Depends(get_engine),
):
    """List calculators, optionally filtered by category."""
    if category is None:
        return engine.list_calculators()
    try:
        return engine.calculators_by_category(category)
    except CalcError as e:
        raise HTTPException(status_code=400, detail=error_detail(e))


@app.get("/calculators/{calc_id}", response_model=CalculatorInfo, tags=["Reference"])
async def get_calculator(calc_id: str, engine: CalcEngine = Depends(get_engine)):
    """Describe one calculator."""
    try:
        return engine.get_info(calc_id)
    except CalculatorNotFoundError as e:
        raise HTTPException(status_code=404, detail=error_detail(e))


@app.get("/categories", response_model=list[CategoryListing], tags=["Reference"])
async def list_categories(engine: CalcEngine = Depends(get_engine)):
    """Calculators grouped by category."""
    return [
        CategoryListing(category=name, calculators=engine.calculators_by_category(name))
        for name in engine.categories()
    ]


@app.get("/units", response_model=list[UnitInfo], tags=["Reference"])
async def list_units():
    """Get the supported measurement units."""
    return [UnitInfo(unit=u.value, symbol=u.symbol, precision=u.precision) for u in Unit]


@app.post("/calculate", response_model=CalcResponse, tags=["Calculations"])
async def calculate(request: CalcRequest, engine: CalcEngine = Depends(get_engine)):
    """
    Run one calculator.

    Returns the primary value, warnings and metadata. Unknown calculators
    give 404; invalid or missing inputs give 400.
    """
    try:
        return engine.run_request(request)
    except CalculatorNotFoundError as e:
        raise HTTPException(status_code=404, detail=error_detail(e))
    except CalcError as e:
        raise HTTPException(status_code=400, detail=error_detail(e))
    except Exception as e:
        logger.exception("Unexpected failure in %s", request.calculator_id)
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/batch", response_model=BatchResponse, tags=["Calculations"])
async def batch(request: BatchRequest, engine: CalcEngine = Depends(get_engine)):
    """
    Run several calculators in one call.

    Entries are independent: a failed entry carries its error and the
    others still run.
    """
    try:
        items = engine.run_batch(request.requests)
    except CalcError as e:
        raise HTTPException(status_code=400, detail=error_detail(e))
    except Exception as e:
        logger.exception("Unexpected failure in batch")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
    return BatchResponse.from_items(items)
