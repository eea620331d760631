"""CSV log of downloaded videos, one row per video id."""

from __future__ import annotations

import csv
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from channelsnoop.formatting import (
    TIMESTAMP_FORMAT,
    format_duration,
    format_number,
    format_size,
    format_timestamp,
)

HEADER = [
    "ID", "标题", "视频号名称", "视频号分类", "公众号名称", "视频链接", "页面链接",
    "文件大小", "时长", "阅读量", "点赞量", "评论量", "收藏数", "转发数",
    "创建时间", "IP所在地", "下载时间",
]
RECORDS_DIR = "downloads"
RECORDS_FILE = "download_records.csv"
ID_PREFIX = "ID_"
_BOM = b"\xef\xbb\xbf"


class RecordError(Exception):
    """Raised when the download log cannot be read or written."""


@dataclass
class VideoDownloadRecord:
    id: str = ""
    title: str = ""
    author: str = ""
    author_type: str = ""
    official_name: str = ""
    url: str = ""
    page_url: str = ""
    file_size: str = ""
    duration: str = ""
    play_count: str = ""
    like_count: str = ""
    comment_count: str = ""
    fav_count: str = ""
    forward_count: str = ""
    create_time: str = ""
    ip_region: str = ""
    download_at: datetime = field(default_factory=datetime.now)

    def to_row(self) -> list[str]:
        """Return the CSV row; the id is prefixed so spreadsheets keep it as text."""
        return [
            ID_PREFIX + self.id,
            self.title,
            self.author,
            self.author_type,
            self.official_name,
            self.url,
            self.page_url,
            self.file_size,
            self.duration,
            self.play_count,
            self.like_count,
            self.comment_count,
            self.fav_count,
            self.forward_count,
            self.create_time,
            self.ip_region,
            self.download_at.strftime(TIMESTAMP_FORMAT),
        ]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _float_text(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _plain_text(value: Any) -> str:
    """Render a decoded JSON value the way a generic value print would."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return _float_text(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + " ".join(_plain_text(item) for item in value) + "]"
    if isinstance(value, dict):
        items = " ".join(f"{k}:{_plain_text(v)}" for k, v in sorted(value.items()))
        return f"map[{items}]"
    return str(value)


def _official_name(contact: dict) -> str | None:
    bind_info = contact.get("bindInfo")
    if not isinstance(bind_info, list):
        return None
    for bind in bind_info:
        if not isinstance(bind, dict):
            continue
        biz_info = bind.get("bizInfo")
        if not isinstance(biz_info, dict):
            continue
        info = biz_info.get("info")
        if not isinstance(info, list) or not info or not isinstance(info[0], dict):
            continue
        nickname = info[0].get("bizNickname")
        if isinstance(nickname, str):
            return nickname
    return None


_COUNT_FIELDS = {
    "readCount": "play_count",
    "likeCount": "like_count",
    "commentCount": "comment_count",
    "favCount": "fav_count",
    "forwardCount": "forward_count",
}


def record_from_profile(
    data: dict, page_url: str, now: datetime | None = None
) -> VideoDownloadRecord:
    """Build a record from a video profile as posted by the page script."""
    record = VideoDownloadRecord(
        id=_plain_text(data.get("id")),
        title=_plain_text(data.get("title")),
        author=_plain_text(data.get("nickname")),
        url=_plain_text(data.get("url")),
        page_url=page_url,
        download_at=now if now is not None else datetime.now(),
    )
    if _is_number(size := data.get("size")):
        record.file_size = format_size(size)
    if _is_number(duration := data.get("duration")):
        record.duration = format_duration(duration)
    for key, attr in _COUNT_FIELDS.items():
        if _is_number(count := data.get(key)):
            setattr(record, attr, format_number(count))
    if _is_number(created := data.get("createtime")):
        record.create_time = format_timestamp(created)

    contact = data.get("contact")
    if isinstance(contact, dict):
        auth_info = contact.get("authInfo")
        if isinstance(auth_info, dict):
            profession = auth_info.get("authProfession")
            if isinstance(profession, str):
                record.author_type = profession
        official = _official_name(contact)
        if official is not None:
            record.official_name = official

    region_info = data.get("ipRegionInfo")
    if isinstance(region_info, dict):
        region = region_info.get("regionText")
        if isinstance(region, str):
            record.ip_region = region
    return record


class RecordStore:
    """Append-only CSV file of download records, deduplicated by video id."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def ensure(self) -> None:
        """Create the file with a BOM and header row if it does not exist yet."""
        if self.path.exists():
            return
        try:
            with self.path.open("wb") as raw:
                raw.write(_BOM)
        except OSError as exc:
            raise RecordError(f"创建下载记录文件失败: {exc}") from exc
        try:
            with self.path.open("a", encoding="utf-8", newline="") as handle:
                csv.writer(handle, lineterminator="\n").writerow(HEADER)
        except OSError as exc:
            raise RecordError(f"写入表头失败: {exc}") from exc

    def contains(self, record_id: str) -> bool:
        """Tell whether a row for this video id is already in the file."""
        if not self.path.exists():
            return False
        wanted = ID_PREFIX + record_id
        try:
            with self.path.open("r", encoding="utf-8", newline="") as handle:
                rows = (row for row in csv.reader(handle, strict=True) if row)
                header = next(rows, None)
                if header is None:
                    return False
                for row in rows:
                    if len(row) != len(header):
                        raise RecordError("读取CSV行失败: wrong number of fields")
                    if len(row) >= 8 and row[0] == wanted:
                        return True
        except csv.Error as exc:
            raise RecordError(f"读取CSV行失败: {exc}") from exc
        except OSError as exc:
            raise RecordError(f"打开下载记录文件失败: {exc}") from exc
        return False

    def add(self, record: VideoDownloadRecord) -> bool:
        """Append the record unless its id is already logged; return whether it was added."""
        with self._lock:
            try:
                if self.contains(record.id):
                    return False
            except RecordError as exc:
                raise RecordError(f"检查现有记录失败: {exc}") from exc
            try:
                fd = os.open(self.path, os.O_APPEND | os.O_WRONLY)
            except OSError as exc:
                raise RecordError(f"打开下载记录文件失败: {exc}") from exc
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                    csv.writer(handle, lineterminator="\n").writerow(record.to_row())
            except OSError as exc:
                raise RecordError(f"写入记录失败: {exc}") from exc
            return True


def init_records(directory: str | os.PathLike[str] | None = None) -> RecordStore:
    """Prepare ``downloads/download_records.csv`` under ``directory`` (default: cwd)."""
    try:
        base = Path(directory) if directory is not None else Path.cwd()
    except OSError as exc:
        raise RecordError(f"获取当前目录失败: {exc}") from exc
    records_dir = base / RECORDS_DIR
    try:
        records_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RecordError(f"创建下载记录目录失败: {exc}") from exc
    store = RecordStore(records_dir / RECORDS_FILE)
    store.ensure()
    return store