"""
Placeholder templating for generated Solidity fragments.

Templates understand three forms:

* ``<name>`` is replaced by the string bound to ``name``;
* ``<?flag>...</flag>`` keeps the body only when ``flag`` is true;
* ``<?flag>...<!flag>...</flag>`` picks the first or second body.

Values are inserted verbatim and never scanned again, so generated text may
contain ``<`` and ``>`` freely. Only template text is interpreted.
"""

from __future__ import annotations

import re
from typing import Mapping, Union

from solsynth.utils.exceptions import sol_assert

ContextValue = Union[str, bool]

_CONDITIONAL = re.compile(r"<\?(\w+)>(.*?)(?:<!\1>(.*?))?</\1>", re.DOTALL)
_PARAMETER = re.compile(r"<(\w+)>")


def _substitute(text: str, context: Mapping[str, ContextValue]) -> str:
    def replace(match: re.Match) -> str:
        name = match.group(1)
        sol_assert(name in context, f"Template parameter <{name}> not bound")
        value = context[name]
        sol_assert(
            isinstance(value, str),
            f"Template parameter <{name}> must be text, got {type(value).__name__}",
        )
        return value

    return _PARAMETER.sub(replace, text)


def render(template: str, context: Mapping[str, ContextValue]) -> str:
    """Render *template* against *context*."""
    out = []
    pos = 0
    for match in _CONDITIONAL.finditer(template):
        out.append(_substitute(template[pos:match.start()], context))
        flag = match.group(1)
        sol_assert(flag in context, f"Template condition <?{flag}> not bound")
        value = context[flag]
        sol_assert(isinstance(value, bool), f"Template condition <?{flag}> must be a bool")
        branch = match.group(2) if value else (match.group(3) or "")
        out.append(render(branch, context))
        pos = match.end()
    out.append(_substitute(template[pos:], context))
    return "".join(out)
