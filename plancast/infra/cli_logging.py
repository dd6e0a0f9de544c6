from __future__ import annotations

import json
import sys
from typing import Any, TextIO


def cli_print(*args: Any, sep: str = " ", end: str = "\n", file: TextIO | None = None, flush: bool = False) -> None:
    stream: TextIO = sys.stdout if file is None else file

    msg = sep.join("" if a is None else str(a) for a in args)

    # Some consoles are not utf-8; replace what they cannot encode.
    enc = getattr(stream, "encoding", None) or "utf-8"
    safe = msg.encode(enc, errors="replace").decode(enc, errors="replace")

    stream.write(safe + end)
    if flush:
        stream.flush()


def emit_json(payload: Any) -> None:
    """Pretty JSON on stdout. Decimals and other non-JSON values go through str()."""
    cli_print(json.dumps(payload, indent=2, ensure_ascii=False, default=str), flush=True)
