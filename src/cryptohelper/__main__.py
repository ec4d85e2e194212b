import uvicorn

from .app import create_app
from .config import load_config
from .errors import StartupError
from .utils.logging import get_logger


def main() -> None:
    log = get_logger("main")
    cfg = load_config()
    try:
        app = create_app(cfg)
    except StartupError as e:
        log.critical(f"[FATAL] {e}")
        raise SystemExit(1) from e
    log.info(f"crypto helper service listening on {cfg.host}:{cfg.port}")
    uvicorn.run(app, host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    main()
