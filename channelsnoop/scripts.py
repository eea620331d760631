"""Script blocks injected into the channels feed and home pages."""

from __future__ import annotations

TIP_MESSAGE = "视频缓存完成，可以下载了！"


def _post_json(endpoint: str, payload: str) -> str:
    """Return a one-line browser call that POSTs ``payload`` as JSON to ``endpoint``."""
    return (
        f'fetch("{endpoint}", {{method: "POST", '
        f'headers: {{"Content-Type": "application/json"}}, '
        f"body: JSON.stringify({payload})}});"
    )


PRELOAD_SCRIPT = """<script>
(() => {
  const tag = document.createElement('script');
  tag.src = '/FileSaver.min.js';
  document.head.appendChild(tag);
})();
</script>"""

DOWNLOAD_TRACKER_SCRIPT = (
    """<script>
if (typeof saveAs === 'undefined') {
  console.log('加载FileSaver.js库');
  const tag = document.createElement('script');
  tag.src = '/FileSaver.min.js';
  tag.onload = () => console.log('FileSaver.js库加载成功');
  document.head.appendChild(tag);
}

window.__wx_channels_recorded_downloads = {};
window.__wx_channels_record_download = (data) => {
  const seen = window.__wx_channels_recorded_downloads;
  if (seen[data.id]) {
    console.log("已经记录过此下载，跳过记录");
    return;
  }
  seen[data.id] = true;
  """
    + _post_json("/__wx_channels_api/record_download", "data")
    + """
};

const wxCurrentProfile = () => {
  const store = window.__wx_channels_store__;
  return store && store.profile;
};
const wxRecordAfter = (original) => function (...args) {
  original(...args);
  const profile = wxCurrentProfile();
  if (profile) window.__wx_channels_record_download({...profile});
};
if (window.__wx_channels_handle_click_download__) {
  window.__wx_channels_handle_click_download__ = wxRecordAfter(window.__wx_channels_handle_click_download__);
}
if (window.__wx_channels_download_cur__) {
  window.__wx_channels_download_cur__ = wxRecordAfter(window.__wx_channels_download_cur__);
}

window.__wx_channels_handle_download_cover = () => {
  const profile = wxCurrentProfile();
  if (!profile) {
    alert("未找到视频信息");
    return;
  }
  const coverUrl = profile.thumbUrl || profile.fullThumbUrl || profile.coverUrl;
  if (!coverUrl) {
    alert("未找到封面图片");
    return;
  }
  window.__wx_channels_record_download({...profile});
  const fileName = "cover_" + profile.id + ".jpg";
  const link = Object.assign(document.createElement('a'), {href: coverUrl, download: fileName, target: "_blank"});
  document.body.appendChild(link);
  link.click();
  setTimeout(() => document.body.removeChild(link), 100);
  setTimeout(() => {
    if (typeof saveAs === 'undefined') return;
    fetch(coverUrl)
      .then((resp) => resp.blob())
      .then((blob) => saveAs(blob, fileName))
      .catch((err) => {
        console.error("下载封面失败:", err);
        alert("下载封面失败，请重试");
      });
  }, 1000);
};
</script>"""
)

CAPTURE_URL_SCRIPT = (
    """<script>
setTimeout(() => {
  """
    + _post_json("/__wx_channels_api/page_url", "{url: window.location.href}")
    + """
}, 2000);
</script>"""
)

VIDEO_CACHE_SCRIPT = (
    """<script>
(() => {
  const MB = 1024 * 1024;
  const HIGHLIGHT = 'rgba(0,128,0,0.8)';
  const INDICATOR_ID = 'video-cache-indicator';
  const firstVideo = () => document.querySelector('video');
  const bufferedRatio = (video) => {
    if (!video || !video.duration || !video.buffered || video.buffered.length === 0) return null;
    return video.buffered.end(video.buffered.length - 1) / video.duration;
  };
  const nearEnd = (video) =>
    !!video && (video.ended || (video.duration && video.currentTime > 0 && video.duration - video.currentTime < 2));

  const monitor = {
    isBuffering: false, lastBufferTime: 0, totalBufferSize: 0, videoSize: 0,
    completeThreshold: 0.98, checkInterval: null,

    startMonitoring(expectedSize) {
      this.stopMonitoring();
      Object.assign(this, {
        isBuffering: true, lastBufferTime: Date.now(), totalBufferSize: 0, videoSize: expectedSize || 0,
      });
      this.checkInterval = setInterval(() => this.checkBufferStatus(), 2000);
      console.log('视频缓存监控已启动，视频大小:', (this.videoSize / MB).toFixed(2) + 'MB');
      this.addStatusIndicator();
      this.setupVideoEndedListener();
      this.monitorNativeBuffering();
    },

    monitorNativeBuffering() {
      const poll = () => {
        const ratio = bufferedRatio(firstVideo());
        if (ratio === null) return false;
        const percent = ratio * 100;
        const indicator = document.getElementById(INDICATOR_ID);
        if (indicator) {
          indicator.innerHTML = '<div>视频缓存中: ' + percent.toFixed(1) + '% (播放器数据)</div>';
          if (percent >= 95) indicator.style.backgroundColor = HIGHLIGHT;
        }
        if (percent >= 98) {
          console.log('根据播放器预加载数据，视频已缓存完成 (' + percent.toFixed(1) + '%)');
          this.finish();
          return true;
        }
        document.querySelectorAll('.progress_bar').forEach((bar) => {
          if (bar.style && bar.style.width) console.log('找到播放器进度条，当前宽度:', bar.style.width);
        });
        return false;
      };
      if (poll()) return;
      const timer = setInterval(() => {
        if (poll() || !this.isBuffering) clearInterval(timer);
      }, 1000);
    },

    setupVideoEndedListener() {
      setTimeout(() => {
        const video = firstVideo();
        if (!video) return;
        video.addEventListener('ended', () => {
          console.log('视频播放已结束，标记为缓存完成');
          this.finish();
        });
        if (video.paused) return;
        const timer = setInterval(() => {
          if (!nearEnd(video)) return;
          console.log('视频接近或已播放完成，标记为缓存完成');
          this.finish();
          clearInterval(timer);
        }, 1000);
      }, 2000);
    },

    addStatusIndicator() {
      const old = document.getElementById(INDICATOR_ID);
      if (old) old.remove();
      const indicator = document.createElement('div');
      indicator.id = INDICATOR_ID;
      indicator.style.cssText = 'position:fixed;bottom:10px;left:10px;background-color:rgba(0,0,0,0.7);'
        + 'color:white;padding:8px 12px;border-radius:4px;z-index:9999;font-size:12px;';
      indicator.innerHTML = '<div>视频缓存中: 0%</div>';
      document.body.appendChild(indicator);
      const timer = setInterval(() => {
        if (!this.isBuffering) {
          clearInterval(timer);
          indicator.remove();
          return;
        }
        let progress = 0;
        if (this.videoSize > 0) {
          progress = this.totalBufferSize / this.videoSize * 100;
        } else {
          const ratio = bufferedRatio(firstVideo());
          if (ratio !== null) progress = ratio * 100;
        }
        indicator.innerHTML = '<div>视频缓存中: ' + progress.toFixed(1) + '%</div>';
        if (progress >= 95) indicator.style.backgroundColor = HIGHLIGHT;
      }, 1000);
    },

    addBuffer(buffer) {
      if (!this.isBuffering) return;
      this.lastBufferTime = Date.now();
      if (buffer && buffer.byteLength) {
        this.totalBufferSize += buffer.byteLength;
        if (this.videoSize > 0) {
          const percent = (this.totalBufferSize / this.videoSize * 100).toFixed(1);
          console.log('视频缓存进度: ' + percent + '% (' + (this.totalBufferSize / MB).toFixed(2)
            + 'MB/' + (this.videoSize / MB).toFixed(2) + 'MB)');
        }
      }
      this.checkCompletion();
    },

    checkBufferStatus() {
      if (!this.isBuffering) return;
      const ratio = bufferedRatio(firstVideo());
      if (ratio !== null && ratio * 100 >= 95) {
        console.log('检测到视频预加载接近完成 (' + (ratio * 100).toFixed(1) + '%)');
        this.checkCompletion(true);
      }
      if (Date.now() - this.lastBufferTime > 10000 && this.totalBufferSize > 0) {
        this.checkCompletion(true);
      }
    },

    checkCompletion(forced) {
      if (!this.isBuffering) return;
      const video = firstVideo();
      let done = false;
      if (nearEnd(video)) {
        console.log('视频已播放完毕或接近结束，认为缓存完成');
        done = true;
      } else if (this.videoSize > 0) {
        const threshold = this.videoSize < 5 * MB ? 0.9 : this.completeThreshold;
        done = this.totalBufferSize / this.videoSize >= threshold;
      } else if (forced && video && video.readyState >= 3 && video.buffered.length > 0) {
        done = video.duration > 0 && video.buffered.end(video.buffered.length - 1) / video.duration >= 0.95;
      }
      if (done) this.finish();
    },

    showNotification() {
      const indicator = document.getElementById(INDICATOR_ID);
      if (indicator) indicator.remove();
      if ('Notification' in window && Notification.permission === 'granted') {
        new Notification('视频缓存完成', {
          body: '视频已缓存完成，可以进行下载操作',
          icon: window.__wx_channels_store__?.profile?.coverUrl,
        });
      }
      const style = document.createElement('style');
      style.textContent = '@keyframes fadeInOut {0% {opacity:0;transform:translateY(20px);} '
        + '10% {opacity:1;transform:translateY(0);} 80% {opacity:1;} 100% {opacity:0;}}';
      document.head.appendChild(style);
      const toast = document.createElement('div');
      toast.style.cssText = 'position:fixed;bottom:20px;right:20px;background-color:rgba(0,0,0,0.7);color:white;'
        + 'padding:10px 20px;border-radius:5px;z-index:9999;animation:fadeInOut 5s forwards;';
      toast.innerHTML = '<div style="display:flex;align-items:center;">'
        + '<span style="font-size:20px;margin-right:10px;">✅</span> <span>"""
    + TIP_MESSAGE
    + """</span></div>';
      document.body.appendChild(toast);
      setTimeout(() => toast.remove(), 5000);
      """
    + _post_json("/__wx_channels_api/tip", '{msg: "' + TIP_MESSAGE + '"}')
    + """
      console.log('视频缓存完成通知已显示');
    },

    stopMonitoring() {
      if (this.checkInterval) {
        clearInterval(this.checkInterval);
        this.checkInterval = null;
      }
      this.isBuffering = false;
    },

    finish() {
      this.showNotification();
      this.stopMonitoring();
    },
  };

  window.__wx_channels_video_cache_monitor = monitor;

  if ('Notification' in window && !['granted', 'denied'].includes(Notification.permission)) {
    document.addEventListener('click', () => Notification.requestPermission(), {once: true});
  }
})();
</script>"""
)


def build_head_injection(main_js: str | bytes) -> str:
    """Return the script blocks to insert right after the page's ``<head>`` tag.

    The page's own script comes first, followed by the FileSaver preload,
    the download tracker, the page-URL capture and the buffering monitor.
    """
    if isinstance(main_js, (bytes, bytearray)):
        main_js = bytes(main_js).decode("utf-8", errors="replace")
    return "".join(
        (
            f"<script>{main_js}</script>",
            PRELOAD_SCRIPT,
            DOWNLOAD_TRACKER_SCRIPT,
            CAPTURE_URL_SCRIPT,
            VIDEO_CACHE_SCRIPT,
        )
    )