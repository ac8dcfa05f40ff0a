from __future__ import annotations

import importlib
from pathlib import Path


def _check_path(label: str, path: Path) -> bool:
    ok = path.exists()
    status = "OK" if ok else "MISSING"
    print(f"[{status}] {label}: {path}")
    return ok


def _check_import(label: str, module_name: str, attr: str | None = None) -> bool:
    try:
        mod = importlib.import_module(module_name)
        if attr:
            getattr(mod, attr)
        print(f"[OK] import {label}")
        return True
    except Exception as e:
        print(f"[WARN] import {label} failed: {e}")
        return False


def main() -> int:
    root = Path(__file__).resolve().parents[1]
    ok = True

    ok &= _check_path(
        "Futon frame entry point",
        root / "futon_toolbox" / "tools" / "futon_frame" / "__main__.py",
    )

    ok &= _check_import("pydantic", "pydantic", "BaseModel")
    ok &= _check_import("loguru", "loguru", "logger")
    ok &= _check_import("futon_frame TOOL", "futon_toolbox.tools.futon_frame", "TOOL")
    if not ok:
        return 2

    from futon_toolbox.tools.futon_frame import TOOL

    res = TOOL.run(TOOL.default_inputs())
    print(f"[{'OK' if res['ok'] else 'FAIL'}] futon_frame default run ({len(res.get('lines', []))} lines)")
    return 0 if res["ok"] else 2


if __name__ == "__main__":
    raise SystemExit(main())
