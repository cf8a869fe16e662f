"""Editing session that composes the codec, option list and URL normalizer."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from .config import EngineConfig
from .option_codec import (
    DecodeError,
    decode,
    encode,
    extract_match_url,
    options_from_records,
)
from .options import IdGenerator, OptionList, new_uid
from .url_normalizer import UrlWarning

LOGGER = logging.getLogger(__name__)

COPIED_INDICATOR_SECONDS = 1.5

ClipboardSink = Callable[[str], None]


class EmptyOptionListError(RuntimeError):
    """Raised when a script is requested for a session without options."""


class CopyIndicator:
    """Report whether output was copied within the last ``duration`` seconds."""

    def __init__(
        self,
        *,
        duration: float = COPIED_INDICATOR_SECONDS,
        time_source: Callable[[], float] | None = None,
    ) -> None:
        self.duration = duration
        self._time_source = time_source or time.monotonic
        self._copied_at: float | None = None

    def mark(self) -> None:
        self._copied_at = self._time_source()

    @property
    def active(self) -> bool:
        if self._copied_at is None:
            return False
        if self._time_source() - self._copied_at >= self.duration:
            self._copied_at = None
            return False
        return True


class EditorSession:
    """Own the option list and URL state the editing surface renders."""

    def __init__(
        self,
        *,
        config: EngineConfig | None = None,
        ids: IdGenerator | None = None,
        clipboard: ClipboardSink | None = None,
        time_source: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.normalizer = self.config.normalizer()
        self._ids = ids or new_uid
        self.options = OptionList(ids=self._ids, defaults=self.config.option_defaults())
        self.clipboard = clipboard
        self.copy_indicator = CopyIndicator(time_source=time_source)
        self.url = ""
        self.url_warning: UrlWarning | None = None
        self.decode_error: str | None = None
        self.output = ""

    def load_script(self, script_text: str) -> DecodeError | None:
        """Replace the option list with the one embedded in ``script_text``.

        On failure the current list is kept and the error is returned and
        remembered in :attr:`decode_error` for display.
        """

        try:
            decoded = decode(
                script_text, ids=self._ids, defaults=self.config.option_defaults()
            )
        except DecodeError as exc:
            LOGGER.warning("could not read options from script: %s", exc)
            self.decode_error = str(exc)
            return exc

        self.decode_error = None
        self.options.load(decoded)
        LOGGER.info("loaded %d options from script", len(decoded))

        match_url = extract_match_url(script_text, wildcard=self.config.url_wildcard)
        if match_url is not None:
            self.set_url(match_url)
        return None

    def load_records(self, records: Any) -> None:
        """Replace the option list with options built from plain record data.

        Raises :class:`DecodeError` for malformed records, leaving the list as is.
        """

        self.options.load(
            options_from_records(
                records, ids=self._ids, defaults=self.config.option_defaults()
            )
        )

    def set_url(self, url: str) -> UrlWarning | None:
        self.url = url
        self.url_warning = self.normalizer.validate(url)
        return self.url_warning

    def apply_fix(self) -> bool:
        """Adopt the suggested URL fix, revalidating it without another repair."""

        warning = self.url_warning
        if warning is None or warning.fix is None:
            return False
        self.url = warning.fix
        self.url_warning = self.normalizer.validate(warning.fix, is_retry=True)
        return True

    def build_script(self) -> str:
        if not self.options:
            raise EmptyOptionListError("add at least one option before generating a script")
        target_url = self.normalizer.strip_query(self.url.strip())
        self.output = encode(
            self.options,
            target_url,
            self.config.template,
            wildcard=self.config.url_wildcard,
        )
        return self.output

    def copy_output(self) -> bool:
        """Send the last generated script to the clipboard sink."""

        if self.clipboard is None or not self.output:
            return False
        self.clipboard(self.output)
        self.copy_indicator.mark()
        return True


__all__ = [
    "COPIED_INDICATOR_SECONDS",
    "ClipboardSink",
    "CopyIndicator",
    "EditorSession",
    "EmptyOptionListError",
]
