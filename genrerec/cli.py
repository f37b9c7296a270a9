from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import pandas as pd

from .checks import run_catalog_checks
from .config import AppConfig, build_source, load_config
from .paths import get_repo_root, resolve_path
from .sources import DirectorySource, HttpSource, TextSource
from .store.catalog import MovieCatalog
from .service.messages import render_load, render_recommendation
from .service.recommender import recommend
from .utils import setup_logging


logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Recommend movies with similar genres (MovieLens 100k u.item/u.data)")
    p.add_argument("--movie-id", type=str, default=None, help="Liked movie id (from u.item)")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML (default: repo config.yaml)")
    p.add_argument("--raw-dir", type=Path, default=None, help="Directory holding u.item and u.data")
    p.add_argument("--base-url", type=str, default=None, help="Fetch u.item/u.data from this URL instead")
    p.add_argument("--top-n", type=int, default=None, help="How many recommendations to return")
    p.add_argument("--list", action="store_true", help="Print the movie list instead of recommending")
    p.add_argument("--check", action="store_true", help="Print data quality checks after loading")
    p.add_argument("--log-level", type=str, default=None, help="DEBUG/INFO/WARNING")
    return p


def _source_from_args(args: argparse.Namespace, cfg: AppConfig) -> TextSource:
    if args.base_url:
        return HttpSource(args.base_url, timeout_s=cfg.data.timeout_s)
    if args.raw_dir is not None:
        return DirectorySource(resolve_path(get_repo_root(), args.raw_dir))
    return build_source(cfg.data)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(args.log_level or cfg.online.log_level)
    top_n = int(args.top_n) if args.top_n is not None else int(cfg.online.top_n)
    if top_n < 1:
        build_arg_parser().error(f"--top-n must be >= 1, got {top_n}")
    source = _source_from_args(args, cfg)

    catalog = MovieCatalog(item_resource=cfg.data.item_resource, data_resource=cfg.data.data_resource)
    outcome = asyncio.run(catalog.init(source))
    print(render_load(outcome))
    if not outcome.ok:
        return 1

    if args.check:
        print("\n=== Data Checks ===")
        df_c = pd.DataFrame([c.__dict__ for c in run_catalog_checks(catalog)])
        print(df_c.to_string(index=False))

    if args.list:
        print("\n=== Movies ===")
        df_m = pd.DataFrame([o.__dict__ for o in catalog.movie_options()])
        print(df_m.to_string(index=False))
        return 0

    try:
        result = recommend(catalog, args.movie_id, top_n=top_n)
    except Exception:
        logger.exception("Unexpected failure computing recommendations")
        print("Error computing recommendations.")
        return 1

    print("\n=== Recommended Movies ===")
    print(render_recommendation(result))
    if result.matches:
        df_r = pd.DataFrame(
            [{"movieId": c.movie.id, "title": c.title, "score": c.rounded_score} for c in result.matches]
        )
        print(df_r.to_string(index=False))
    return 2 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
