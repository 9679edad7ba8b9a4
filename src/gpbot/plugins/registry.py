"""Resolve `package.module:ClassName` adapter paths from configuration."""

from __future__ import annotations

import importlib
from typing import Any

from gpbot.core.errors import AdapterError


def load_adapter(dotted_path: str) -> type:
    module_path, sep, class_name = dotted_path.partition(":")
    if not sep or not module_path or not class_name:
        raise AdapterError(f"Adapter path must look like 'module:Class': {dotted_path}")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise AdapterError(f"Unable to import adapter module: {module_path}") from exc
    adapter_cls = getattr(module, class_name, None)
    if not isinstance(adapter_cls, type):
        raise AdapterError(f"No adapter class {class_name} in {module_path}")
    return adapter_cls


def build_adapter(dotted_path: str, **kwargs: Any) -> Any:
    adapter_cls = load_adapter(dotted_path)
    try:
        return adapter_cls(**kwargs)
    except TypeError as exc:
        raise AdapterError(f"Unable to build adapter {dotted_path}: {exc}") from exc
