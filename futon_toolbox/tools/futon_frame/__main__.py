from __future__ import annotations

from futon_toolbox.core.logging import configure_logging

from .tool import TOOL


def main() -> int:
    configure_logging()
    res = TOOL.run(TOOL.default_inputs(), emit=print)
    return 0 if res["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
