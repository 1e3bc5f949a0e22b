"""Output mode selection for ServiceResult.

Humans get Rich rendering, machines get ``--json``, scripts get ``-q``
(ids only).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from writenex.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from writenex.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    if json_output:
        return result.model_dump_json(indent=2)
    if quiet:
        return render_quiet(result)
    return render_result(result, verbose=verbose)
