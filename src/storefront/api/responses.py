"""The response envelope shared by every Storefront endpoint.

``{"success": bool, "message"?: str, "data"?: ..., "errors"?: [...], "count"?: int}``
"""

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(data=None, message=None, errors=None, count=None, success=True, status_code=200):
    content = {"success": success}
    if message is not None:
        content["message"] = message
    if data is not None:
        content["data"] = data
    if errors:
        content["errors"] = errors
    if count is not None:
        content["count"] = count
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def failure(message, status_code, errors=None):
    return envelope(message=message, errors=errors, success=False, status_code=status_code)
