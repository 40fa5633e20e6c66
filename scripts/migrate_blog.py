"""CLI runner for migrating static Twig blog articles into Strapi."""

from __future__ import annotations

import argparse
import datetime as dt
import json
from pathlib import Path

from blogmigrator.config import get_settings
from blogmigrator.services.migration import MigrationStats, discover_articles, migrate_articles
from blogmigrator.services.strapi.client import StrapiClient, StrapiError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Migrate Twig blog articles to Strapi.")
    parser.add_argument(
        "--blog-dir",
        default=str(settings.blog_dir),
        help="Root directory holding one sub-directory per insurance system.",
    )
    parser.add_argument(
        "--system",
        default=None,
        help="Only migrate this system directory (rca, casco, ...).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Maximum number of articles to process (0 = all).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and build payloads without sending anything to Strapi.",
    )
    parser.add_argument(
        "--update",
        action="store_true",
        help="Update posts whose slug already exists instead of skipping them.",
    )
    parser.add_argument(
        "--report-dir",
        default=str(settings.report_dir),
        help="Where to write migration_report.json.",
    )
    return parser.parse_args(argv)


def write_report(report_dir: Path, stats: MigrationStats, *, dry_run: bool) -> Path:
    payload = {
        "stats": stats,
        "dry_run": dry_run,
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    }
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / "migration_report.json"
    report_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return report_path


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = parse_args(argv)

    token = settings.resolve_api_token()
    if not token and not args.dry_run:
        print("[error] No API token found. Create .api_token or set STRAPI_API_TOKEN.")
        return 1
    if args.dry_run:
        print("[info] Dry run: no data will be sent to Strapi.")

    articles = discover_articles(
        Path(args.blog_dir),
        settings.blog_systems,
        settings.blog_skip_files,
        system_filter=args.system,
    )
    print(f"[info] Found {len(articles)} articles under {args.blog_dir}")

    client = None
    if not args.dry_run:
        client = StrapiClient(
            settings.strapi_url,
            token,
            delay_seconds=settings.request_delay_seconds,
            timeout_s=settings.request_timeout_seconds,
        )
    try:
        stats = migrate_articles(
            articles,
            client,
            dry_run=args.dry_run,
            limit=args.limit,
            update_existing=args.update,
            settings=settings,
        )
    except StrapiError as exc:
        print(f"[error] Could not load categories from Strapi: {exc}")
        return 1

    print(
        "[summary] total={total}, success={success}, skipped={skipped}, "
        "failed={failed}".format(**stats)
    )
    for err in stats["errors"]:
        print(f"[warn] {err['article']}: {err['error']}")
    report_path = write_report(Path(args.report_dir), stats, dry_run=args.dry_run)
    print(f"[summary] report saved to {report_path}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
