from fastapi.responses import JSONResponse, PlainTextResponse

# Fixed header set sent with every function response
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def function_response(content, status=200):
    return JSONResponse(status_code=status, content=content, headers=dict(CORS_HEADERS))


def function_error(error, status=400, **extra):
    return function_response({"error": str(error), **extra}, status=status)


def function_text(text, status=200):
    return PlainTextResponse(text, status_code=status, headers=dict(CORS_HEADERS))


def preflight_response():
    return function_text("ok")


def success_response(data=None, message="OK", status=200):
    return JSONResponse(
        status_code=status,
        content={
            "ok": True,
            "data": data or {},
            "error": None,
            "message": message,
        }
    )


def error_response(error_code, status=400, message="An error occurred", data=None):
    return JSONResponse(
        status_code=status,
        content={
            "ok": False,
            "data": data or {},
            "error": error_code,
            "message": message,
        }
    )
