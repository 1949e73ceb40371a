import argparse

from . import create_app
from .utils.logging import logger


def main(argv=None):
    parser = argparse.ArgumentParser(prog="ingestion", description="Run one image ingestion backend")
    parser.add_argument("--backend", choices=["a", "b"], help="identity preset (default: $BACKEND or a)")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, help="listening port (default: $PORT or the preset's)")
    args = parser.parse_args(argv)

    overrides = {"BACKEND": args.backend, "PORT": str(args.port) if args.port else None}
    app = create_app({k: v for k, v in overrides.items() if v is not None})
    name = app.config["BACKEND_IDENTITY"].name
    port = app.config["PORT"]
    logger.info(f"{name} listening on port {port}")
    app.run(host=args.host, port=port, threaded=True)


if __name__ == "__main__":
    main()
