import json
import shutil
from pathlib import Path

import pytest

from blogmigrator.config import Settings
from scripts import migrate_blog, preview_article

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def blog_dir(tmp_path: Path) -> Path:
    root = tmp_path / "blog"
    (root / "rca").mkdir(parents=True)
    (root / "home").mkdir()
    shutil.copy(FIXTURES / "named_object.html.twig", root / "rca" / "ce-este-rca.html.twig")
    shutil.copy(FIXTURES / "positional_call.html.twig", root / "home" / "locuinta.html.twig")
    shutil.copy(FIXTURES / "empty.html.twig", root / "home" / "gol.html.twig")
    return root


def patch_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, **overrides) -> Settings:
    settings = Settings().model_copy(
        update={
            "strapi_api_token": "",
            "strapi_token_file": tmp_path / ".api_token",
            "blog_systems": ["rca", "home"],
            **overrides,
        }
    )
    monkeypatch.setattr(migrate_blog, "get_settings", lambda: settings)
    return settings


def test_dry_run_writes_report(
    blog_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    patch_settings(monkeypatch, tmp_path)
    report_dir = tmp_path / "report"
    code = migrate_blog.main(
        ["--blog-dir", str(blog_dir), "--dry-run", "--report-dir", str(report_dir)]
    )
    assert code == 0

    report = json.loads((report_dir / "migration_report.json").read_text(encoding="utf-8"))
    assert report["dry_run"] is True
    assert report["stats"]["total"] == 3
    assert report["stats"]["success"] == 2
    assert report["stats"]["skipped"] == 1
    assert "[summary] total=3, success=2, skipped=1, failed=0" in capsys.readouterr().out


def test_missing_token_aborts_live_run(
    blog_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    patch_settings(monkeypatch, tmp_path)
    code = migrate_blog.main(
        ["--blog-dir", str(blog_dir), "--report-dir", str(tmp_path / "report")]
    )
    assert code == 1
    assert "[error] No API token found" in capsys.readouterr().out
    assert not (tmp_path / "report").exists()


def test_parse_args_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    settings = patch_settings(monkeypatch, tmp_path, blog_dir=tmp_path / "blog")
    args = migrate_blog.parse_args([])
    assert args.blog_dir == str(settings.blog_dir)
    assert args.limit == 0
    assert args.dry_run is False
    assert args.update is False
    assert args.system is None


def test_preview_uses_parent_directory_as_category(blog_dir: Path) -> None:
    result = preview_article.preview(blog_dir / "home" / "locuinta.html.twig")
    assert result["category"] == "home"
    assert result["slug"] == "locuinta"
    assert result["article"]["grammar"] == "positional_call"
    assert len(result["blocks"]) == 9


def test_preview_main_writes_json(blog_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "out" / "preview.json"
    code = preview_article.main(
        [str(blog_dir / "rca" / "ce-este-rca.html.twig"), "--category", "rca", "--out", str(out)]
    )
    assert code == 0
    body = json.loads(out.read_text(encoding="utf-8"))
    assert body["article"]["title"] == "Ce este asigurarea RCA"
    assert body["article"]["tocItems"][0] == {"href": "#definitie", "title": "Definitie"}
