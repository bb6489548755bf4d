from fastapi import APIRouter, Request, Response

from coinconv.schemas.convert import ConvertResult

router = APIRouter()


def _convert(request: Request, from_symbol: str, amount: str | None, to_symbol: str | None) -> ConvertResult:
    service = request.app.state.conversion_service
    return ConvertResult(result=service.convert(from_symbol, amount, to_symbol))


@router.get('/coins', response_model=list[str])
def list_coins(request: Request):
    return request.app.state.conversion_service.list_symbols()


@router.get('/convert/{from_symbol}', response_model=ConvertResult)
def convert_one(from_symbol: str, request: Request):
    return _convert(request, from_symbol, None, None)


@router.get('/convert/{from_symbol}/{amount}', response_model=ConvertResult)
def convert_to_base(from_symbol: str, amount: str, request: Request):
    return _convert(request, from_symbol, amount, None)


@router.get('/convert/{from_symbol}/{amount}/{to_symbol}', response_model=ConvertResult)
def convert(from_symbol: str, amount: str, to_symbol: str, request: Request):
    return _convert(request, from_symbol, amount, to_symbol)


@router.post('/log/{key}')
def log_usage(key: str, request: Request):
    request.app.state.usage_tracker.record(key)
    return Response(status_code=200)


@router.get('/metrics/prices')
def price_metrics(request: Request):
    return request.app.state.refresh_worker.metrics()


@router.get('/metrics/usage')
def usage_metrics(request: Request):
    metrics = request.app.state.usage_tracker.metrics()
    metrics['conversions'] = request.app.state.conversion_service.conversions
    return metrics
