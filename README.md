# channelsnoop

`channelsnoop` is a library of the pieces that a local download proxy
for the WeChat Channels web player needs: scanning command-line options,
checking for and installing a root certificate, switching the macOS
system proxy, the scripts to inject into the player page, coloured
console reports about videos, and a CSV log of downloaded videos.

## Installation

```
pip install .
```

## What is in the package

### `channelsnoop.argv`

- `args_to_map(args)` collects `-k` / `--key` options into a dict. A
  value is taken from `--key=value` or, failing that, from the next
  argument when it does not start with `-`; otherwise it is `""`.
- `args_value(margs, default, *names)` returns the first non-empty value
  among the given option names, or `default`.

```python
>>> from channelsnoop.argv import args_to_map, args_value
>>> opts = args_to_map(["prog", "-p", "8080", "--dev=Wi-Fi"])
>>> opts
{'p': '8080', 'dev': 'Wi-Fi'}
>>> args_value(opts, "", "p", "port")
'8080'
```

### `channelsnoop.certificate`

- `check_certificate(cert_name)` tells whether a root certificate with
  that common name is in the system store.
- `install_certificate(cert_data)` writes the certificate bytes to a
  temporary file and trusts it as a root (PowerShell `Import-Certificate`
  on Windows, `security add-trusted-cert` on macOS; this may need
  administrator rights).
- `fetch_certificates()` lists the store's certificates;
  `parse_windows_certificates(output)` and
  `parse_macos_certificates(output)` parse the listing tools' output into
  `Certificate` / `Subject` values.

On platforms other than Windows and macOS these raise
`CertificateError`, as do failures of the underlying tools.

### `channelsnoop.system_proxy` (macOS)

- `ProxySettings(device, hostname, port)`; `with_defaults()` fills empty
  fields: the device behind the active network interface (falling back to
  `Wi-Fi`), host `127.0.0.1`, port `2023`.
- `enable_proxy_macos(settings)` / `disable_proxy_macos(settings)` set or
  turn off the HTTP and HTTPS web proxy with `networksetup` and return the
  settings used.
- `get_network_interface()`, `parse_hardware_ports(output)` and
  `find_active_port(ports, nwi_output)` find the `HardwarePort` in use.

Failures raise `ProxyError`.

### `channelsnoop.formatting`

```python
>>> from channelsnoop.formatting import format_duration, format_number, format_size
>>> format_duration(65000), format_duration(3_725_000)
('01:05', '01:02:05')
>>> format_number(12345)
'1.2万'
>>> format_size(1048576)
'1.00 MB'
```

`format_timestamp(seconds)` renders Unix seconds as local
`YYYY-MM-DD HH:MM:SS`.

### `channelsnoop.records`

- `init_records(directory=None)` creates `downloads/download_records.csv`
  under `directory` (the current directory by default) and returns a
  `RecordStore`. A new file starts with a UTF-8 BOM and the header row
  `HEADER`.
- `record_from_profile(data, page_url, now=None)` turns a video profile
  dict into a `VideoDownloadRecord`, formatting size, duration, counts and
  creation time and picking out the channel category, linked
  official-account name and IP region.
- `RecordStore.add(record)` appends the record unless its id is already
  logged and returns whether it was added; `contains(record_id)` checks
  for an id. Ids are stored with an `ID_` prefix so spreadsheets keep
  them as text.

Columns, in order: ID, title, channel name, channel category,
official-account name, video link, page link, file size, duration, read,
like, comment, favourite and forward counts, creation time, IP region and
download time. Read/write problems raise `RecordError`.

### `channelsnoop.scripts`

`build_head_injection(main_js)` returns the `<script>` blocks meant to go
right after the page's `<head>` tag: the given page script, a FileSaver
preloader, a download tracker that posts to
`/__wx_channels_api/record_download`, a capture of the page URL posted to
`/__wx_channels_api/page_url`, and a buffering monitor that shows a
notice and posts to `/__wx_channels_api/tip` once a video is cached.

### `channelsnoop.console`

`print_title(version)`, `print_usage()`, `print_separator()`,
`print_label_value(icon, label, value, color=None)`,
`print_record_info(path)` and `print_profile(data)` print the coloured
banner, help text and video details.

## What the package does not do

The package has no command to run and no proxy server. It does not
listen for traffic, rewrite the player's HTML or JavaScript in transit,
or answer the `/__wx_channels_api/...` requests that the injected scripts
send; code that does so has to be supplied around these pieces.

## Running the tests

```
pip install .[test]
pytest
```