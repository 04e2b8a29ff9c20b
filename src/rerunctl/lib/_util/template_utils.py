# SPDX-FileCopyrightText: 2026 Jiri Vyskocil
# SPDX-License-Identifier: Apache-2.0

"""Minimal template rendering via ``{{VAR}}`` token replacement."""

import re
from importlib import resources
from importlib.resources.abc import Traversable

TEMPLATE_DIR: Traversable = resources.files("rerunctl") / "resources" / "templates"

_TOKEN_RE = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")


def render_text(content: str, variables: dict) -> str:
    """Replace ``{{KEY}}`` tokens in *content* with *variables* values.

    Single pass: substituted values are never scanned for further tokens.
    Unknown tokens are left as they are.
    """
    return _TOKEN_RE.sub(
        lambda m: str(variables[m.group(1)]) if m.group(1) in variables else m.group(0),
        content,
    )


def render_template(name: str, variables: dict) -> str:
    """Read the packaged template *name* and render it with *variables*."""
    content = (TEMPLATE_DIR / name).read_text(encoding="utf-8")
    return render_text(content, variables)
