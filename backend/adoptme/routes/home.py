"""AdoptMe Backend - Welcome Page"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from adoptme import __version__

router = APIRouter(tags=["Home"], include_in_schema=False)

WELCOME_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>AdoptMe API</title>
</head>
<body>
  <h1>AdoptMe API</h1>
  <p>Pet adoption service, version {version}.</p>
  <ul>
    <li><a href="/api-docs">Interactive API documentation (Swagger UI)</a></li>
    <li><a href="/redoc">Reference documentation (ReDoc)</a></li>
    <li><a href="/health">Health check</a></li>
  </ul>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def home() -> HTMLResponse:
    return HTMLResponse(WELCOME_PAGE.format(version=__version__))
