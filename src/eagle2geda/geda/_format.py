"""Shared formatting utilities for gEDA pcb file output."""


def cm(quantity) -> int:
    """Raw centimil integer of a Millimeter, Mil or CentiMil quantity."""
    return quantity.to_centimils().value


def fmt_angle(v: float) -> str:
    """Format an angle in degrees: integers without decimals, else up to 6 places."""
    if v == int(v) and abs(v) < 1e10:
        return str(int(v))
    return f"{v:.6f}".rstrip("0").rstrip(".")


def escape_string(s: str) -> str:
    """Escape a value for a double-quoted gEDA pcb string."""
    return s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ").replace("\r", "")


def quote(s: str) -> str:
    return f'"{escape_string(s)}"'
