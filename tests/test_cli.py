"""End-to-end tests for the command line entry point."""

import json
import xml.etree.ElementTree as ET

import pytest

from mdfeed.cli import main


@pytest.fixture
def site_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    drink = tmp_path / "content" / "coffee" / "latte.md"
    drink.parent.mkdir(parents=True)
    drink.write_text(
        "---\ntitle: Latte\ndate: 2024-02-03\ncategories: [tech, life]\n---\nSteamed milk.\n",
        encoding="utf-8",
    )
    return tmp_path


class TestMain:
    def test_default_paths(self, site_root, capsys):
        main([])
        pages = json.loads((site_root / "static" / "data" / "pages.json").read_text(encoding="utf-8"))
        assert pages[0]["metadata"]["slug"] == "latte"
        assert pages[0]["metadata"]["category"] == "coffee"
        assert pages[0]["metadata"]["read_time"] == 0
        root = ET.parse(site_root / "static" / "rss.xml").getroot()
        item = root.find("channel/item")
        assert item.findtext("title") == "Latte"
        assert item.findtext("link") == "https://bev.pdewey.com/latte"
        assert item.findtext("pubDate") == "2024-02-03"
        assert item.findtext("category") == "tech, life"
        out = capsys.readouterr().out
        assert "Successfully generated pages.json and rss.xml" in out
        assert out.strip() == "Successfully generated pages.json and rss.xml"

    def test_missing_title_exits_with_error(self, site_root, capsys):
        (site_root / "content" / "untitled.md").write_text("No title.\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert out.startswith("Error writing rss.xml:")
        assert "'title'" in out

    def test_missing_content_dir(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        assert capsys.readouterr().out.startswith("Error processing directory:")
        assert not (tmp_path / "static").exists()

    def test_malformed_front_matter(self, site_root, capsys):
        (site_root / "content" / "broken.md").write_text("---\ntitle: x\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main([])
        assert "invalid front-matter format" in capsys.readouterr().out
        assert not (site_root / "static").exists()

    def test_flags_and_config(self, site_root):
        (site_root / "site.toml").write_text(
            'site_url = "https://drinks.test"\nrss_output = "public/feed.xml"\n', encoding="utf-8"
        )
        main(["--json-output", "public/pages.json", "--workers", "2"])
        assert (site_root / "public" / "pages.json").exists()
        root = ET.parse(site_root / "public" / "feed.xml").getroot()
        assert root.findtext("channel/link") == "https://drinks.test"
        assert root.findtext("channel/item/link") == "https://drinks.test/latte"

    def test_bad_config(self, site_root, capsys):
        (site_root / "site.toml").write_text("site_url = ", encoding="utf-8")
        with pytest.raises(SystemExit):
            main([])
        assert capsys.readouterr().out.startswith("Error loading config:")

    def test_usage_error_reported_on_stdout(self, site_root, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--workers", "many"])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert "error: argument --workers" in captured.out
        assert captured.err == ""
        assert not (site_root / "static").exists()

    def test_unknown_flag_exits_with_status_one(self, site_root, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--verbose"])
        assert excinfo.value.code == 1
        assert "unrecognized arguments: --verbose" in capsys.readouterr().out

    def test_bad_workers_in_config(self, site_root, capsys):
        (site_root / "site.toml").write_text('workers = "lots"\n', encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        assert capsys.readouterr().out.startswith("Error loading config:")
