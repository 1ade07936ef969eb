# promcommon

Common data structures and helpers for monitoring components.

## What is in the package

- `promcommon.labels`: label-name and label-value validation
  (`is_valid_label_name`, `is_valid_label_value`, `parse_label_name`), byte-order
  sorting (`sort_label_names`, `sort_label_values`), `LabelPair`, and the
  standard label-name constants such as `METRIC_NAME_LABEL` and `ALERT_NAME_LABEL`.
- `promcommon.labelset`: `LabelSet`, a `dict` with `validate`, `equal`,
  `before`, `clone`, `merge`, `fingerprint`, `fast_fingerprint` and
  `from_json`. Its `str()` form is `{name="value", ...}`.
- `promcommon.metric`: `Metric` (a `LabelSet` that prints as
  `name{labels}`) and `is_valid_metric_name`.
- `promcommon.fingerprint`: 64-bit FNV-1a hashes of label sets.
  `Fingerprint`, `FingerprintSet`, `labels_to_signature`,
  `label_set_to_fingerprint`, `label_set_to_fast_fingerprint`,
  `signature_for_labels`, `signature_without_labels`, and
  `fingerprint_from_string` / `parse_fingerprint` for hexadecimal text.
- `promcommon.timestamps`: `Time` (milliseconds since the epoch, JSON as
  seconds with a fraction), `Interval`, and `Duration` with
  `parse_duration` for the `1y2w3d4h5m6s7ms` syntax. A year counts as 365
  days, a week as 7 days and a day as 24 hours.
- `promcommon.value`: `SampleValue`, `SamplePair`, `Sample`, `Samples`,
  `SampleStream`, `Vector`, `Matrix`, `Scalar`, `String` and `ValueType`,
  with their JSON encodings and NaN-aware equality.
- `promcommon.alert`: `Alert`, `Alerts` and `AlertStatus`. It covers
  validation, resolved/firing status and chronological ordering.
- `promcommon.silence`: `Matcher` and `Silence` with validation.
- `promcommon.autoneg`: `parse_accept` and `negotiate` for HTTP `Accept`
  headers.
- `promcommon.promlog`: `AllowedLevel`, `AllowedFormat`, `Config`, and the
  loggers built by `new` and `new_dynamic`. The loggers write logfmt or JSON
  lines stamped with a UTC `ts` and the `caller`. `with_level` tags entries
  with a level. `DynamicLogger.set_level` changes the level while the logger
  is in use.
- `promcommon.promlog_flag`: `add_flags` adds `--log.level` (default
  `info`) and `--log.format` (default `logfmt`) to an
  `argparse.ArgumentParser`. `apply_flags` copies the parsed values into a
  `Config`.
- `promcommon.route`: `Router`, a WSGI application with path prefixes
  (`with_prefix`), chained handler wrappers (`with_instrumentation`), and
  `:name` / `*name` path parameters. Read them with `param`, or set them
  with `with_param`. `file_serve` serves a directory by the `filepath`
  parameter.
- `promcommon.server`: `static_file_server`, a WSGI application that serves
  files under a directory. It sets the content type for `.js`, `.css`,
  `.png`, `.jpg` and `.gif`.
- `promcommon.sigv4_config`: `SigV4Config`, loaded from YAML with
  `from_yaml`, which rejects unknown and repeated fields. `validate` requires
  the access key and secret key together or neither.
- `promcommon.version`: `print_version`, `info` and `build_context`. They
  report the module-level `VERSION`, `REVISION`, `BRANCH`, `BUILD_USER` and
  `BUILD_DATE` values, which are empty unless set at build time.

## What it does not do

- `SigV4Config` only holds and checks settings. The package does not sign HTTP
  requests and does not look up AWS credentials.
- The package exports no build information as a metric. `promcommon.version`
  only formats strings.
- There is no command-line program. Every part is a library to import.

## Installation

```
pip install promcommon
```

## Examples

Fingerprints and signatures:

```python
from promcommon.labelset import LabelSet
from promcommon.fingerprint import labels_to_signature

ls = LabelSet({"job": "api", "instance": "host:9100"})
print(ls)                      # {instance="host:9100", job="api"}
print(ls.fingerprint())        # 16 hex digits
print(labels_to_signature({"name": "value"}))
```

Durations and timestamps:

```python
from promcommon.timestamps import Time, parse_duration

d = parse_duration("3w2d1h")
print(d)                       # 23d1h
t = Time.from_unix(1136239445)
print(t.add(d).to_json())
```

Query values:

```python
from promcommon.value import Vector

vec = Vector.from_json('[{"metric":{"__name__":"up"},"value":[1234.567,"1"]}]')
print(vec)                     # up => 1 @[1234.567]
print(vec.to_json())
```

Content negotiation:

```python
from promcommon.autoneg import negotiate

negotiate("text/html;q=0.9,*/*;q=0.5", ["application/json", "text/html"])
# 'text/html'
```

Logging with settings taken from the command line:

```python
import argparse
import sys
from promcommon.promlog import Config, new, with_level
from promcommon.promlog_flag import add_flags, apply_flags

parser = argparse.ArgumentParser()
config = Config()
add_flags(parser, config)
apply_flags(parser.parse_args(["--log.level", "debug"]), config)
logger = new(config, sys.stderr)
with_level(logger, "info").log("msg", "started")
```

Routing in a WSGI application:

```python
from promcommon.route import Router, param

router = Router().with_prefix("/api")

def hello(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [f"hello {param(environ, 'name')}".encode()]

router.get("/hello/:name", hello)
# `router` is a WSGI application.
```

## Running the tests

```
pip install -e .[test]
pytest
```