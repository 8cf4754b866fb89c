# src/bsky_session_bff/main.py

import sys
import traceback
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import PlainTextResponse, Response

from .auth_utils import AtprotoSessionStore
from .config import ConfigurationError, SERVER_HOST, SERVER_PORT, load_settings
from .session_manager import ensure_valid_session, initialize_session_data

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# --- FastAPI App Setup ---
app = FastAPI(
    title="Bluesky Session BFF",
    description="Authenticates against Bluesky and keeps the session tokens in browser cookies.",
    version="0.1.0"
)


# --- Dependency for the AT Protocol session store ---
def get_session_store(request: Request) -> AtprotoSessionStore:
    # Set by run() or by startup_event before the listener accepts requests
    return request.app.state.session_store


# --- Favicon Route ---
@app.api_route("/favicon.ico", methods=ALL_METHODS, include_in_schema=False)
async def favicon():
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Catch-all Route ---
@app.api_route("/{full_path:path}", methods=ALL_METHODS)
async def handle_request(request: Request, store: AtprotoSessionStore = Depends(get_session_store)):
    current_date_time = datetime.now(timezone.utc).isoformat()
    print(f"MAIN: Received {request.method} request for {request.url.path} at {current_date_time}")

    cookies = request.headers.get("cookie")
    response = PlainTextResponse("Hello World!")
    try:
        result = await initialize_session_data(store, cookies, response)

        # Only check trusted cookies, freshly issued tokens are known to be good
        if not result.tokens_updated and cookies:
            print("MAIN: Cookies present, calling ensure_valid_session")
            await ensure_valid_session(store, result.session, response)

        return response

    except Exception as e:
        print(f"MAIN: Failed to initialize session: {e}")
        traceback.print_exc()
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# --- Startup Event ---
@app.on_event("startup")
async def startup_event():
    print("--- Bluesky Session BFF (FastAPI) Starting Up ---")
    if getattr(app.state, "session_store", None) is None:
        # Served without run(), e.g. `uvicorn bsky_session_bff.main:app`.
        # A ConfigurationError here aborts startup before the socket is bound.
        app.state.session_store = AtprotoSessionStore.from_settings(load_settings())
    print("Session store configured: Yes")
    print("-------------------------------------------")


def run() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"MAIN: {e}", file=sys.stderr)
        sys.exit(1)

    app.state.session_store = AtprotoSessionStore.from_settings(settings)
    print(f"MAIN: Server listening on port {SERVER_PORT}")
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    run()
