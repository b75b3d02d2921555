"""JSON helpers for response envelopes and the persisted pairing record.

orjson is used when the ``speedups`` extra is installed.
"""

from __future__ import annotations

try:
    import orjson

    loads = orjson.loads
except ImportError:
    import json

    loads = json.loads


try:
    from mashumaro.mixins.orjson import DataClassORJSONMixin

    DataClassJSONMixin = DataClassORJSONMixin
except ImportError:
    from mashumaro.mixins.json import DataClassJSONMixin as _JSONMixin

    DataClassJSONMixin = _JSONMixin  # type: ignore[assignment, misc]
