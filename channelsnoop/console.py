"""Coloured console output for the proxy's status and video notices."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from termcolor import colored

from channelsnoop.formatting import (
    format_duration,
    format_number,
    format_size,
    format_timestamp,
)
from channelsnoop.records import HEADER

SEPARATOR = "─────────────────────────────────────────────────────────────────"
DEFAULT_COLOR = "green"

_BANNER = (
    "██╗  ████████╗ █████╗  ██████╗  ██████╗     ██╗   ██╗███████╗",
    "██║  ╚══██╔══╝██╔══██╗██╔═══██╗██╔═══██╗    ██║   ██║██╔════╝",
    "██║     ██║   ███████║██║   ██║██║   ██║    ██║   ██║███████╗",
    "██║     ██║   ██╔══██║██║   ██║██║   ██║     ╚██╗██╔╝╚════██║",
    "███████╗██║   ██║  ██║╚██████╔╝╚██████╔╝      ╚███╔╝ ███████║",
    "╚══════╝╚═╝   ╚═╝  ╚═╝ ╚═════╝  ╚═════╝        ╚══╝  ╚══════╝",
)

_USAGE = """Usage: wx_video_download [OPTION...]
Download WeChat video.

      --help                 display this help and exit
  -v, --version              output version information and exit
  -p, --port                 set proxy server network port
  -d, --dev                  set proxy server network device"""

_COUNTS = (
    ("readCount", "👁️", "阅读量"),
    ("likeCount", "👍", "点赞量"),
    ("commentCount", "💬", "评论量"),
    ("favCount", "🔖", "收藏数"),
    ("forwardCount", "🔄", "转发数"),
)


def _line(text: str, color: str) -> None:
    print(colored(text, color))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _display(value: Any) -> str:
    """Render a value the way a plain value print shows it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_display(item) for item in value) + "]"
    return str(value)


def print_separator() -> None:
    """Print a cyan horizontal rule."""
    _line(SEPARATOR, "cyan")


def print_title(version: str) -> None:
    """Print the banner and the program version."""
    for row in _BANNER:
        _line(row, "cyan")
    _line(f"    视频号下载助手 v{version}", "yellow")
    print()


def print_label_value(icon: str, label: str, value: Any, color: str | None = None) -> None:
    """Print a coloured ``icon label:`` prefix followed by the plain value."""
    prefix = f"{icon:<2} {label + ':':<6}"
    print(colored(prefix, color or DEFAULT_COLOR), end="")
    print(_display(value))


def print_record_info(path: str | os.PathLike[str]) -> None:
    """Describe where and how download records are kept."""
    print_separator()
    _line("📋 下载记录信息", "blue")
    print_separator()
    print_label_value("📁", "记录文件", os.fspath(path))
    print_label_value("✏️", "记录格式", "CSV表格格式")
    print_label_value("📊", "记录字段", ", ".join(HEADER))
    print_separator()


def print_usage() -> None:
    """Print the command-line help."""
    print(_USAGE)


def print_profile(data: Mapping[str, Any]) -> None:
    """Print the details of a video profile reported by the page script."""
    print_label_value("💡", "[提醒]", "视频已成功播放", "yellow")
    print_label_value("💡", "[提醒]", "可以在「更多」菜单中下载视频啦！", "yellow")
    _line("", "yellow")

    print_separator()
    _line("📊 视频详细信息", "blue")
    print_separator()

    if isinstance(nickname := data.get("nickname"), str):
        print_label_value("👤", "视频号名称", nickname)
    if isinstance(title := data.get("title"), str):
        print_label_value("📝", "视频标题", title)
    if _is_number(duration := data.get("duration")):
        print_label_value("⏱️", "视频时长", format_duration(duration))
    if _is_number(size := data.get("size")):
        print_label_value("📦", "视频大小", format_size(size))

    for key, icon, label in _COUNTS:
        if _is_number(count := data.get(key)):
            print_label_value(icon, label, format_number(count))

    if _is_number(created := data.get("createtime")):
        print_label_value("📅", "创建时间", format_timestamp(created))

    region_info = data.get("ipRegionInfo")
    if isinstance(region_info, Mapping):
        region = region_info.get("regionText")
        if isinstance(region, str) and region:
            print_label_value("🌍", "IP所在地", region)

    file_format = data.get("fileFormat")
    if isinstance(file_format, list) and file_format:
        print_label_value("🎞️", "视频格式", file_format)
    if isinstance(cover := data.get("coverUrl"), str):
        print_label_value("🖼️", "视频封面", cover)
    if isinstance(url := data.get("url"), str):
        print_label_value("🔗", "原始链接", url)
    print_separator()
    _line("\n", "yellow")