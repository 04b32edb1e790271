"""Show help for the token under the cursor."""

from __future__ import annotations

from loguru import logger

from pshelp.backend import HelpBackend, allocate_output
from pshelp.resolver import ContextualHelpResolver
from pshelp.types import HelpRequest
from pshelp.viewer import HelpViewer, ViewerOptions


def show_help(
    line_text: str,
    cursor_offset: int,
    *,
    resolver: ContextualHelpResolver,
    backend: HelpBackend,
    viewer: HelpViewer,
    options: ViewerOptions | None = None,
) -> HelpRequest | None:
    """Resolve, fetch and display help.

    Returns the request that was shown, or ``None`` when no help applies to the
    cursor position. Backend failures remove the temporary output and propagate.
    """

    request = resolver.resolve(line_text, cursor_offset)
    if request is None:
        return None

    output = allocate_output()
    try:
        backend.run(request, output)
    except Exception:
        output.unlink(missing_ok=True)
        raise

    logger.info("help.shown template={!r} arguments={}", request.template, request.arguments[1:])
    viewer.open(output, options or ViewerOptions(title=request.title))
    return request.with_output(output)
