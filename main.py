from fastapi import FastAPI, HTTPException

from memory_bank_migrator.api import create_app

DISABLED_DETAIL = (
    "Local API disabled. Set enable_local_api = true under [runtime] in config.toml "
    "or export MBM_ENABLE_LOCAL_API=1"
)

try:
    app = create_app(require_enabled=True)
except RuntimeError:
    app = FastAPI(title="Memory Bank Migrator (disabled)", version="0.1.0")

    @app.api_route("/{path:path}", methods=["GET", "POST"])
    async def api_disabled(path: str) -> dict[str, str]:
        raise HTTPException(status_code=503, detail=DISABLED_DETAIL)
