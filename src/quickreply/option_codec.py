"""Decode option records out of userscript text and encode them back in."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Final, Iterable, List, Mapping, Sequence

from .embedding import from_embedded, to_embedded
from .options import (
    IdGenerator,
    Option,
    OptionDefaults,
    OptionKind,
    infer_kind,
    new_uid,
    pad_colour,
)
from .template import (
    MATCH_DIRECTIVE,
    OPTIONS_ANCHOR,
    OPTIONS_PLACEHOLDER,
    URL_PLACEHOLDER,
    render_template,
)

LOGGER = logging.getLogger(__name__)

RECORD_KEYS: Final[tuple[str, ...]] = ("type", "id", "text", "name", "colour")
DEFAULT_WILDCARD: Final[str] = "*"

OptionRecord = Dict[str, str]


class DecodeError(ValueError):
    """Raised when the embedded options block cannot be parsed."""


def decode(
    script_text: str,
    *,
    ids: IdGenerator | None = None,
    defaults: OptionDefaults | None = None,
) -> List[Option]:
    """Return the options embedded in ``script_text``.

    A script without an options block (or with the template placeholder
    still in place) yields an empty list. Malformed data raises
    :class:`DecodeError` and nothing is returned.
    """

    match = OPTIONS_ANCHOR.search(script_text)
    if match is None:
        LOGGER.debug("no options block found in %d characters", len(script_text))
        return []

    literal = match.group("options")
    if literal == OPTIONS_PLACEHOLDER:
        return []

    payload = from_embedded(literal)
    try:
        records = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"options block is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise DecodeError("options block is nested too deeply") from exc
    return options_from_records(records, ids=ids, defaults=defaults)


def options_from_records(
    records: Any,
    *,
    ids: IdGenerator | None = None,
    defaults: OptionDefaults | None = None,
) -> List[Option]:
    """Build ordered options from parsed record data, correcting field values."""

    if not isinstance(records, list):
        raise DecodeError(
            f"options block must be an array, received {type(records).__name__}"
        )

    generate = ids or new_uid
    fallback = defaults or OptionDefaults()
    options: list[Option] = []
    for position, record in enumerate(records, start=1):
        fields = _validate_record(record, position)
        content = fields.get("text", "")
        kind = OptionKind.from_wire(fields.get("type"))
        if kind is None:
            kind = infer_kind(content)
        options.append(
            Option(
                uid=generate(),
                order=position,
                kind=kind,
                selector=fields.get("id", ""),
                content=content,
                label=fields.get("name", fallback.label),
                colour=pad_colour(fields.get("colour", ""), default=fallback.colour),
            )
        )
    return options


def _validate_record(record: Any, position: int) -> Mapping[str, str]:
    if not isinstance(record, Mapping):
        raise DecodeError(
            f"option #{position} must be an object, received {type(record).__name__}"
        )
    unknown = sorted(set(record) - set(RECORD_KEYS))
    if unknown:
        raise DecodeError(
            f"option #{position} has unsupported keys: " + ", ".join(unknown)
        )

    fields: dict[str, str] = {}
    for key, value in record.items():
        if value is None:
            continue
        if not isinstance(value, str):
            raise DecodeError(
                f"option #{position} field {key!r} must be a string, "
                f"received {type(value).__name__}"
            )
        fields[key] = value
    return fields


def options_to_records(
    options: Iterable[Option], *, escape_newlines: bool = True
) -> List[OptionRecord]:
    """Project options onto the record shape stored in the script.

    Newlines become the two characters ``\\n`` unless ``escape_newlines`` is
    false, which is how the CLI exports lists meant for hand editing.
    """

    escape = _escape_newlines if escape_newlines else str
    return [
        {
            "type": option.kind.value,
            "id": option.selector,
            "text": escape(option.content),
            "name": escape(option.label),
            "colour": option.colour,
        }
        for option in options
    ]


def _escape_newlines(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\n", "\\n")


def serialize_records(records: Sequence[OptionRecord]) -> str:
    return json.dumps(list(records), ensure_ascii=False, separators=(",", ":"))


def encode(
    options: Iterable[Option],
    target_url: str,
    script_template: str,
    *,
    wildcard: str = DEFAULT_WILDCARD,
) -> str:
    """Render ``script_template`` with ``options`` and the ``target_url`` match."""

    literal = to_embedded(serialize_records(options_to_records(options)))
    return render_template(
        script_template,
        url_match=f"{target_url}{wildcard}",
        options_literal=literal,
    )


def extract_match_url(
    script_text: str, *, wildcard: str = DEFAULT_WILDCARD
) -> str | None:
    """Return the script's ``@match`` URL without its trailing wildcard."""

    match = MATCH_DIRECTIVE.search(script_text)
    if match is None:
        return None
    url = match.group("url")
    if url == URL_PLACEHOLDER:
        return None
    if wildcard and url.endswith(wildcard):
        url = url[: -len(wildcard)]
    return url


__all__ = [
    "DEFAULT_WILDCARD",
    "DecodeError",
    "OptionRecord",
    "RECORD_KEYS",
    "decode",
    "encode",
    "extract_match_url",
    "options_from_records",
    "options_to_records",
    "serialize_records",
]
