from fastapi import APIRouter, Response
from sqlalchemy import text
from starlette import status

router = APIRouter()


@router.get('/api')
def status_get(response: Response) -> str:
    """
    Fast check to ensure API is running.
    Load balancers and deploy scripts poll this, keep it dependency free.
    """
    response.headers['Content-Type'] = 'text/html; charset=utf-8'
    return 'storefront is open'


@router.get('/database')
def database_health_check(response: Response) -> str:
    from storefront.network.database.session import db

    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return f'database is unreachable: {e}'

    response.headers['Content-Type'] = 'text/html; charset=utf-8'
    return 'database is happy'
