from __future__ import annotations

import argparse

from app.config import get_settings
from app.demo.runner import run_demo
from app.observability.logging import configure_logging


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Emit two nested spans around a blocking computation")
    parser.add_argument(
        "--seconds",
        type=float,
        default=settings.heavy_computation_seconds,
        help="How long the simulated computation blocks",
    )
    args = parser.parse_args(argv)

    configure_logging()
    run_demo(seconds=args.seconds)


if __name__ == "__main__":
    main()
