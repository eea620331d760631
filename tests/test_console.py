import pytest

from channelsnoop import console
from channelsnoop.formatting import format_duration, format_number, format_size
from channelsnoop.records import HEADER


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)


def test_separator_prints_rule(capsys):
    console.print_separator()
    out = capsys.readouterr().out
    assert console.SEPARATOR in out


def test_title_shows_version(capsys):
    console.print_title("1.2.0")
    out = capsys.readouterr().out
    assert "视频号下载助手 v1.2.0" in out
    assert "╚══════╝" in out


def test_label_value_prints_label_and_value(capsys):
    console.print_label_value("🔌", "代理端口", 2025, None)
    out = capsys.readouterr().out
    assert "代理端口:" in out
    assert out.rstrip("\n").endswith("2025")


def test_label_value_lists_in_brackets(capsys):
    console.print_label_value("🎞️", "视频格式", ["xWT111", "xWT112"], "green")
    out = capsys.readouterr().out
    assert "[xWT111 xWT112]" in out


def test_record_info_lists_path_and_fields(capsys, tmp_path):
    path = tmp_path / "downloads" / "download_records.csv"
    console.print_record_info(path)
    out = capsys.readouterr().out
    assert str(path) in out
    assert "CSV表格格式" in out
    assert ", ".join(HEADER) in out


def test_usage_lists_options(capsys):
    console.print_usage()
    out = capsys.readouterr().out
    assert "-p, --port" in out
    assert "-d, --dev" in out
    assert out.startswith("Usage: wx_video_download")


def test_profile_prints_known_fields(capsys):
    data = {
        "nickname": "频道甲",
        "title": "一个视频",
        "duration": 65000,
        "size": 3 * 1024 * 1024,
        "likeCount": 12345,
        "ipRegionInfo": {"regionText": "广东"},
        "fileFormat": ["xWT111"],
        "url": "https://media.example.com/v.mp4",
    }
    console.print_profile(data)
    out = capsys.readouterr().out
    assert "频道甲" in out
    assert "一个视频" in out
    assert format_duration(65000) in out
    assert format_size(3 * 1024 * 1024) in out
    assert format_number(12345) in out
    assert "广东" in out
    assert "[xWT111]" in out
    assert "https://media.example.com/v.mp4" in out


def test_profile_skips_missing_and_mistyped_fields(capsys):
    console.print_profile({"title": 5, "ipRegionInfo": {"regionText": ""}, "fileFormat": []})
    out = capsys.readouterr().out
    assert "视频详细信息" in out
    assert "视频标题" not in out
    assert "IP所在地" not in out
    assert "视频格式" not in out