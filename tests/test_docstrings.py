"""Docstring completeness checks for modules, parameters and return values."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Iterable, List, Set

import pytest
from numpydoc.docscrape import NumpyDocString

import scoutlens


def _collect_modules(root: ModuleType) -> List[ModuleType]:
    modules: List[ModuleType] = [root]
    for info in pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}."):
        modules.append(importlib.import_module(info.name))
    return modules


def _collect_callables(modules: Iterable[ModuleType]) -> List[object]:
    items: List[object] = []
    seen: Set[int] = set()

    def add(obj: object) -> None:
        if id(obj) not in seen:
            seen.add(id(obj))
            items.append(obj)

    for module in modules:
        for name, obj in inspect.getmembers(module):
            if name.startswith("__") or getattr(obj, "__module__", None) != module.__name__:
                continue
            if inspect.isfunction(obj):
                add(obj)
            elif inspect.isclass(obj):
                add(obj)
                for meth_name, meth in inspect.getmembers(obj):
                    if meth_name.startswith("__"):
                        continue
                    func = meth.__func__ if inspect.ismethod(meth) else meth
                    if inspect.isfunction(func) and func.__module__ == obj.__module__:
                        add(func)

    return items


def _documented_parameters(docstring: str | None) -> Set[str]:
    if not docstring:
        return set()
    parsed = NumpyDocString(docstring)
    return {name for name, _, _ in parsed["Parameters"]}


def _has_returns_section(docstring: str | None) -> bool:
    if not docstring:
        return False
    return bool(NumpyDocString(docstring)["Returns"])


def _needs_returns_documentation(sig: inspect.Signature) -> bool:
    annotation = sig.return_annotation
    if annotation is inspect.Signature.empty or annotation in {None, type(None)}:
        return False
    if isinstance(annotation, str):
        return annotation.strip().lower() not in {"none", "nonetype", "typing.none"}
    return True


_MODULES = _collect_modules(scoutlens)
_CALLABLES = _collect_callables(_MODULES)


def _object_id(obj: object) -> str:
    module = getattr(obj, "__module__", "<unknown>")
    name = getattr(obj, "__qualname__", getattr(obj, "__name__", repr(obj)))
    return f"{module}.{name}"


@pytest.mark.parametrize("module", _MODULES, ids=lambda m: m.__name__)
def test_modules_have_docstrings(module: ModuleType) -> None:
    """Every module opens with a summary docstring."""
    assert inspect.getdoc(module), f"Module {module.__name__} has no docstring"


@pytest.mark.parametrize("obj", _CALLABLES, ids=_object_id)
def test_parameters_are_documented(obj: object) -> None:
    """Assert that every parameter in the signature is described in the docstring."""
    signature = inspect.signature(obj)
    params_to_check = [
        p
        for p in signature.parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD) and p.name not in {"self", "cls"}
    ]
    if not params_to_check:
        pytest.skip("No parameters requiring documentation")

    documented = _documented_parameters(inspect.getdoc(obj))
    missing = [p.name for p in params_to_check if p.name not in documented]

    assert not missing, f"Docstring for {_object_id(obj)} is missing parameter entries: " + ", ".join(missing)


@pytest.mark.parametrize("obj", _CALLABLES, ids=_object_id)
def test_returns_are_documented(obj: object) -> None:
    """Require a Returns section whenever the callable annotates a non-None value."""
    if inspect.isclass(obj) or not _needs_returns_documentation(inspect.signature(obj)):
        pytest.skip("Return value does not require documentation")

    assert _has_returns_section(inspect.getdoc(obj)), f"Docstring for {_object_id(obj)} is missing a Returns section"
