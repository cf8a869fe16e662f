"""Public quick-reply userscript API re-exported from the engine modules."""
from __future__ import annotations

from . import catalog as _catalog
from . import config as _config
from . import embedding as _embedding
from . import option_codec as _option_codec
from . import options as _options
from . import session as _session
from . import template as _template
from . import url_normalizer as _url_normalizer

__all__: list[str] = []

for _module in (
    _catalog,
    _config,
    _embedding,
    _option_codec,
    _options,
    _session,
    _template,
    _url_normalizer,
):  # pragma: no branch - data-driven
    for _name in getattr(_module, "__all__", ()):
        globals()[_name] = getattr(_module, _name)
        if _name not in __all__:
            __all__.append(_name)

del _module, _name
