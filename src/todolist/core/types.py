"""Type aliases used across the to-do data layer."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
TodoId = str
UserId = str
