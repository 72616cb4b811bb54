from fastapi import Response
from fastapi.responses import JSONResponse
from typing import Optional, Any
from pydantic import BaseModel
import json


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        # Handle Pydantic models
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        # Dates, enums and other custom types fall back to their string form
        return str(obj)


def build_response(
    status_code: int,
    status: str = None,
    message: str = None,
    data: Any = None,
    error: Optional[str] = None,
) -> Response:
    if status_code == 204:
        return Response(status_code=204)

    response = {}

    if status is not None:
        response["status"] = status

    if message is not None:
        response["message"] = message

    if data is not None:
        # If data is a Pydantic model, convert it to a dictionary
        if isinstance(data, BaseModel):
            response["data"] = data.model_dump(mode="json")
        # If data is a list of Pydantic models, convert each to a dictionary
        elif isinstance(data, list) and all(isinstance(item, BaseModel) for item in data):
            response["data"] = [item.model_dump(mode="json") for item in data]
        else:
            response["data"] = json.loads(json.dumps(data, cls=CustomJSONEncoder))

    if error is not None:
        response["error"] = error

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json"
    )
