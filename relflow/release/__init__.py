"""Release workflow: stage marker, version fields, tool adapters, controller."""

from __future__ import annotations
