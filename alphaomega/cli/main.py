import typer
import requests
import os
from typing import Optional

from alphaomega.core.history import Outcome


app = typer.Typer(help="Client for the Alpha/Omega forecaster API")
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
API_KEY = os.getenv("API_KEY")


def _headers():
    h = {}
    if API_KEY:
        h["X-API-Key"] = API_KEY
    return h


def _show(r: requests.Response):
    if r.status_code >= 400:
        typer.echo(f"error {r.status_code}: {r.json().get('detail')}", err=True)
        raise typer.Exit(1)
    if r.headers.get("content-type", "").startswith("application/json"):
        typer.echo(r.json())
    else:
        typer.echo(r.text)


@app.command()
def add(result: str):
    """Record one outcome: alpha|a|α or omega|o|ω."""
    lab = Outcome.parse(result)
    if lab is None:
        raise typer.BadParameter(f"unknown outcome {result!r}")
    _show(requests.post(f"{BASE}/outcomes", json={"result": lab.value}, headers=_headers()))


@app.command()
def reset():
    _show(requests.post(f"{BASE}/reset", headers=_headers()))


@app.command()
def state():
    _show(requests.get(f"{BASE}/state", headers=_headers()))


@app.command()
def best():
    _show(requests.get(f"{BASE}/best", headers=_headers()))


@app.command()
def start(x: float, y: float, width: float, height: float,
          sensitivity: Optional[int] = typer.Option(None, help="10..50, step 5")):
    """Start sampling the given region of the capture source."""
    body = {"region": {"x": x, "y": y, "width": width, "height": height}, "sensitivity": sensitivity}
    _show(requests.post(f"{BASE}/monitor/start", json=body, headers=_headers()))


@app.command()
def stop():
    _show(requests.post(f"{BASE}/monitor/stop", headers=_headers()))


@app.command()
def sensitivity(value: int):
    _show(requests.put(f"{BASE}/monitor/sensitivity", json={"value": value}, headers=_headers()))


@app.command()
def export(fmt: str = typer.Argument("summary", help="json | methods | history | summary")):
    paths = {"json": "/export/json", "methods": "/export/methods.csv",
             "history": "/export/history.csv", "summary": "/export/summary"}
    if fmt not in paths:
        raise typer.BadParameter(f"unknown format {fmt!r}")
    _show(requests.get(f"{BASE}{paths[fmt]}", headers=_headers()))


if __name__ == "__main__":
    app()
