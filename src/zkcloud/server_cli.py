"""CLI entry point for the zkcloud server."""

import argparse
import json
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="zkcloud-server",
        description="zkcloud local cloud server",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: ZKCLOUD_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: ZKCLOUD_PORT or 8080)")
    parser.add_argument("--snapshot", default=None, help="Snapshot name restored at start and saved at shutdown")
    parser.add_argument("--data-dir", default=None, help="Directory for snapshots and worker files")
    parser.add_argument(
        "--worker",
        action="append",
        default=None,
        help="Worker factory as developer/repo=package.module:factory (repeatable)",
    )
    args = parser.parse_args(argv)

    if args.snapshot:
        os.environ["ZKCLOUD_SNAPSHOT_NAME"] = args.snapshot
    if args.data_dir:
        os.environ["ZKCLOUD_DATA_DIR"] = args.data_dir
    if args.worker:
        os.environ["ZKCLOUD_WORKERS"] = json.dumps(args.worker)

    import uvicorn

    from zkcloud.config import Settings

    settings = Settings()
    uvicorn.run(
        "zkcloud.main:build_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()
