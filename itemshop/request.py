"""Request binding and tag-based validation of request models."""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


class ValidationError(ValueError):
    """Raised when a model breaks its validation rules."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, dict, tuple)):
        return False
    return not value


def _size(value):
    if isinstance(value, (str, list, dict, tuple)):
        return len(value)
    return value


def _check(name, value, rules):
    for rule in rules.split(","):
        key, _, arg = rule.partition("=")
        if key == "required":
            if _missing(value):
                return f"{name}: required"
        elif key == "email":
            if not isinstance(value, str) or not _EMAIL.fullmatch(value):
                return f"{name}: email"
        elif key in ("max", "min"):
            size = _size(value)
            if size is None:
                continue
            limit = float(arg)
            if (key == "max" and size > limit) or (key == "min" and size < limit):
                return f"{name}: {key}={arg}"
    return None


def _errors(data, prefix=""):
    for f in dataclasses.fields(data):
        value = getattr(data, f.name)
        rules = f.metadata.get("validate")
        if rules:
            error = _check(prefix + f.name, value, rules)
            if error:
                yield error
                continue
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            yield from _errors(value, prefix + f.name + ".")


def validate(data) -> None:
    """Check ``data`` against its fields' rules; raise ValidationError on failure."""
    if not dataclasses.is_dataclass(data) or isinstance(data, type):
        raise TypeError("validate expects a dataclass instance")
    errors = list(_errors(data))
    if errors:
        raise ValidationError(errors)


def bind(model, payload):
    """Build ``model`` from a JSON-like payload.

    Binding and validation problems are logged, not raised; the built
    instance is always returned.
    """
    instance = None
    if not isinstance(payload, Mapping):
        logger.error("Error binding data: payload is not an object")
    else:
        names = {
            f.metadata.get("json", f.name): f.name
            for f in dataclasses.fields(model)
            if f.init
        }
        kwargs = {names[k]: v for k, v in payload.items() if k in names}
        try:
            instance = model(**kwargs)
        except TypeError as exc:
            logger.error("Error binding data: %s", exc)
    if instance is None:
        instance = model()
    try:
        validate(instance)
    except ValidationError as exc:
        logger.error("Error: Validate data failed: %s", exc)
    return instance