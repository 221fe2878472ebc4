from fastapi import APIRouter, Depends, HTTPException, Header, Request
from fastapi.responses import PlainTextResponse

from alphaomega import export
from alphaomega.api.schemas import (
    AddOut, BestOut, EntryOut, MethodOut, MonitorOut, MonitorStartIn,
    OutcomeIn, SensitivityIn, TickOut,
)
from alphaomega.core.history import Outcome
from alphaomega.errors import CaptureUnavailable, InvalidRegion, InvalidSensitivity
from alphaomega.monitor import Monitor
from alphaomega.services import Forecaster, entry_to_dict, method_to_dict
from alphaomega.vision.region import CaptureRegion

# Handlers are async so every mutation runs on the event loop that also drives the monitor
router = APIRouter()


def _auth(request: Request, api_key_header: str | None = Header(default=None, alias="X-API-Key")):
    key = request.app.state.settings.api_key
    if key and api_key_header != key:
        raise HTTPException(status_code=401, detail="Invalid API key")


def _fc(request: Request) -> Forecaster:
    return request.app.state.forecaster


def _monitor(request: Request) -> Monitor:
    return request.app.state.monitor


def _state(request: Request) -> dict:
    out = _fc(request).state(limit=request.app.state.settings.history_limit)
    out["monitor"] = _monitor(request).status()
    return out


# -------- core --------
@router.get('/state')
async def state(request: Request):
    return _state(request)


@router.post('/outcomes', response_model=AddOut, dependencies=[Depends(_auth)])
async def add_outcome(data: OutcomeIn, request: Request):
    entry = _fc(request).add_outcome(Outcome(data.result))
    return {
        'accepted': entry is not None,
        'entry': entry_to_dict(entry) if entry else None,
        'state': _state(request),
    }


@router.post('/reset', dependencies=[Depends(_auth)])
async def reset(request: Request):
    _fc(request).clear_all()
    return _state(request)


@router.get('/history', response_model=list[EntryOut])
async def history(request: Request):
    return [entry_to_dict(e) for e in _fc(request).get_history()]


@router.get('/methods', response_model=list[MethodOut])
async def methods(request: Request):
    return [method_to_dict(m) for m in _fc(request).get_methods()]


@router.get('/best', response_model=BestOut)
async def best(request: Request):
    fc = _fc(request)
    m = fc.ensemble.best()
    nxt = fc.next_prediction()
    return {'name': m.name, 'accuracy': m.accuracy, 'prediction': nxt.value if nxt else None}


# -------- monitoring --------
@router.get('/monitor', response_model=MonitorOut)
async def monitor_status(request: Request):
    return _monitor(request).status()


@router.post('/monitor/start', response_model=MonitorOut, dependencies=[Depends(_auth)])
async def monitor_start(data: MonitorStartIn, request: Request):
    mon = _monitor(request)
    try:
        region = CaptureRegion(**data.region.model_dump())
        mon.start(region, sensitivity=data.sensitivity)
    except (InvalidRegion, InvalidSensitivity) as e:
        raise HTTPException(400, detail=str(e))
    except CaptureUnavailable as e:
        raise HTTPException(503, detail=str(e))
    return mon.status()


@router.post('/monitor/stop', response_model=MonitorOut, dependencies=[Depends(_auth)])
async def monitor_stop(request: Request):
    mon = _monitor(request)
    mon.stop()
    return mon.status()


@router.post('/monitor/tick', response_model=TickOut, dependencies=[Depends(_auth)])
async def monitor_tick(request: Request):
    mon = _monitor(request)
    if not mon.active:
        raise HTTPException(409, detail="monitoring is not active")
    result = mon.tick()
    return {'detected': result.value if result else None, 'monitor': mon.status()}


@router.put('/monitor/sensitivity', response_model=MonitorOut, dependencies=[Depends(_auth)])
async def monitor_sensitivity(data: SensitivityIn, request: Request):
    mon = _monitor(request)
    try:
        mon.set_sensitivity(data.value)
    except InvalidSensitivity as e:
        raise HTTPException(400, detail=str(e))
    return mon.status()


# -------- export --------
@router.get('/export/json')
async def export_json(request: Request):
    return export.to_json(_fc(request))


@router.get('/export/methods.csv')
async def export_methods_csv(request: Request):
    return PlainTextResponse(export.methods_csv(_fc(request)), media_type="text/csv",
                             headers={"Content-Disposition": "attachment; filename=prediction-methods.csv"})


@router.get('/export/history.csv')
async def export_history_csv(request: Request):
    return PlainTextResponse(export.history_csv(_fc(request)), media_type="text/csv",
                             headers={"Content-Disposition": "attachment; filename=prediction-history.csv"})


@router.get('/export/summary')
async def export_summary(request: Request):
    return PlainTextResponse(export.summary_text(_fc(request)))
