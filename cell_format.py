import datetime as dt
import math
import re

import pandas as pd

FORMAT_GENERAL = "General"
FORMAT_TEXT = "@"

DATETIME_PATTERN = "yyyy-mm-dd hh:mm:ss"
TIME_PATTERN = "hh:mm:ss"
DATE_PATTERN = "yyyy-mm-dd"

PENDING_FORMULA = "=..."
TRUNCATION_MARK = "~"

_STRFTIME = {
    DATETIME_PATTERN: "%Y-%m-%d %H:%M:%S",
    TIME_PATTERN: "%H:%M:%S",
    DATE_PATTERN: "%Y-%m-%d",
}

# Day zero of the 1900 date system, shifted for the phantom 1900-02-29.
_EXCEL_EPOCH = "1899-12-30"

_EXPONENT = re.compile(r"^([^eE]*)(?:[eE]([+-])([0#?]*))?$")


def _is_sentinel(format_code) -> bool:
    return not format_code or format_code in (FORMAT_GENERAL, FORMAT_TEXT)


def is_date_format(format_code) -> bool:
    if _is_sentinel(format_code):
        return False
    lower = str(format_code).lower()
    return (
        "y" in lower
        or "m" in lower
        or "d" in lower
        or "h" in lower
        or "am" in lower
        or "pm" in lower
    )


def normalize_date_format(format_code) -> str:
    lower = str(format_code).lower()
    has_time = "h" in lower or "am" in lower or "pm" in lower
    if has_time:
        if "y" in lower or "d" in lower:
            return DATETIME_PATTERN
        return TIME_PATTERN
    return DATE_PATTERN


def _as_number(value):
    """Finite number for ``value``, or None; "nan" and "inf" text are not numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_datetime(value):
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if isinstance(value, dt.time):
        return dt.datetime.combine(dt.date(1899, 12, 30), value)
    serial = _as_number(value)
    if serial is None:
        return None
    try:
        moment = pd.to_datetime(serial, unit="D", origin=_EXCEL_EPOCH)
    except (ValueError, OverflowError, pd.errors.OutOfBoundsDatetime):
        return None
    if pd.isna(moment):
        return None
    return moment.to_pydatetime()


def format_date(value, pattern: str) -> str:
    moment = _as_datetime(value)
    if moment is None:
        return plain_text(value)
    return moment.strftime(_STRFTIME[pattern])


def _split_sections(format_code) -> list[str]:
    """Split a format code on ``;`` outside quoted text."""
    code = str(format_code)
    sections = []
    current = []
    quoted = False
    i = 0
    while i < len(code):
        ch = code[i]
        if ch == "\\" and not quoted:
            current.append(code[i : i + 2])
            i += 2
            continue
        if ch == '"':
            quoted = not quoted
        elif ch == ";" and not quoted:
            sections.append("".join(current))
            current = []
            i += 1
            continue
        current.append(ch)
        i += 1
    sections.append("".join(current))
    return sections


def _tokenize(section: str) -> list[tuple[str, str]]:
    """Break one section into (kind, text) tokens.

    Kinds: ``lit`` (text printed as is), ``num`` (digit placeholders, grouping,
    decimal point, exponent), ``pct``, ``general`` and ``text`` (``@``).
    """
    tokens = []
    i = 0
    n = len(section)
    while i < n:
        ch = section[i]
        if ch == '"':
            end = section.find('"', i + 1)
            end = n if end == -1 else end
            tokens.append(("lit", section[i + 1 : end]))
            i = end + 1
        elif ch == "\\":
            tokens.append(("lit", section[i + 1 : i + 2]))
            i += 2
        elif ch == "_":
            # padding the width of the next character
            tokens.append(("lit", " "))
            i += 2
        elif ch == "*":
            i += 2
        elif ch == "[":
            end = section.find("]", i)
            end = n if end == -1 else end
            inner = section[i + 1 : end]
            # [$€-407] is a currency symbol; colors and conditions print nothing
            if inner.startswith("$"):
                tokens.append(("lit", inner[1:].split("-")[0]))
            i = end + 1
        elif section[i : i + 7].lower() == "general":
            tokens.append(("general", ""))
            i += 7
        elif ch == "@":
            tokens.append(("text", ""))
            i += 1
        elif ch == "%":
            tokens.append(("pct", "%"))
            i += 1
        elif ch in "eE" and i + 1 < n and section[i + 1] in "+-":
            j = i + 2
            while j < n and section[j] in "0#?":
                j += 1
            tokens.append(("num", section[i:j]))
            i = j
        elif ch in "0#?.,":
            tokens.append(("num", ch))
            i += 1
        else:
            tokens.append(("lit", ch))
            i += 1
    return tokens


def _trim_fraction(text: str, min_decimals: int) -> str:
    whole, dot, frac = text.partition(".")
    while len(frac) > min_decimals and frac.endswith("0"):
        frac = frac[:-1]
    return whole + dot + frac


def _render_fixed(number, int_part, has_dot, frac_part) -> str:
    grouping = "," in int_part
    int_min = int_part.count("0")
    frac_max = sum(frac_part.count(c) for c in "0#?")
    frac_min = frac_part.count("0")

    text = format(number, f"{',' if grouping else ''}.{frac_max}f")
    whole, _, frac = text.partition(".")
    if whole == "0" and int_min == 0:
        whole = ""
    elif not grouping:
        whole = whole.zfill(int_min)
    if not has_dot:
        return whole
    return _trim_fraction(f"{whole}.{frac}", frac_min)


def _render_scientific(number, frac_part, exp_sign, exp_digits) -> str | None:
    frac_max = sum(frac_part.count(c) for c in "0#?")
    frac_min = frac_part.count("0")
    exponent = 0 if number == 0 else math.floor(math.log10(number))
    try:
        mantissa = f"{number / 10 ** exponent:.{frac_max}f}"
        if float(mantissa) >= 10:
            exponent += 1
            mantissa = f"{number / 10 ** exponent:.{frac_max}f}"
    except (ZeroDivisionError, OverflowError):
        # subnormal magnitudes
        return None
    if "." in mantissa:
        mantissa = _trim_fraction(mantissa, frac_min).rstrip(".")
    sign = "-" if exponent < 0 else ("+" if exp_sign == "+" else "")
    return f"{mantissa}E{sign}{abs(exponent):0{max(1, len(exp_digits))}d}"


def _render_digits(number, core: str) -> str | None:
    match = _EXPONENT.match(core)
    if match is None:
        return None
    mantissa, exp_sign, exp_digits = match.groups()
    int_part, dot, frac_part = mantissa.partition(".")
    # each trailing comma scales by a thousand
    scale = len(int_part) - len(int_part.rstrip(","))
    int_part = int_part.rstrip(",")
    number = number / 1000 ** scale
    if exp_sign is not None:
        return _render_scientific(number, frac_part, exp_sign, exp_digits)
    return _render_fixed(number, int_part, bool(dot), frac_part)


def _render_section(number, tokens) -> str | None:
    kinds = [kind for kind, _ in tokens]
    core = "".join(text for kind, text in tokens if kind == "num")
    first_digit = next((i for i, kind in enumerate(kinds) if kind == "num"), None)
    # fractions (# ?/?) and similar layouts are not rendered
    if first_digit is not None and any(
        kind == "lit" and text == "/" for kind, text in tokens[first_digit:]
    ):
        return None

    number = number * 100 ** kinds.count("pct")
    if "general" in kinds:
        digits = plain_text(number)
    elif core:
        digits = _render_digits(number, core)
        if digits is None:
            return None
    else:
        digits = ""

    out = []
    placed = False
    for kind, text in tokens:
        if kind in ("num", "general"):
            if not placed:
                out.append(digits)
                placed = True
        elif kind in ("lit", "pct"):
            out.append(text)
    return "".join(out)


def _render_text(text: str, tokens) -> str:
    parts = []
    for kind, value in tokens:
        if kind == "text":
            parts.append(text)
        elif kind == "lit":
            parts.append(value)
    return "".join(parts)


def format_number(value, format_code) -> str:
    """Apply a non-date format code.

    Up to four sections are honored (positive, negative, zero, text) with
    literal text, padding, grouping, scaling, percent and scientific forms.
    """
    sections = _split_sections(format_code)
    number = _as_number(value)
    if number is None:
        if len(sections) > 3:
            text_section = sections[3]
        else:
            text_section = next((s for s in sections if "@" in s), None)
        if text_section is None:
            return plain_text(value)
        return _render_text(plain_text(value), _tokenize(text_section))

    sign = ""
    if number < 0 and len(sections) > 1 and sections[1]:
        section = sections[1]
    elif number == 0 and len(sections) > 2 and sections[2]:
        section = sections[2]
    else:
        section = sections[0]
        sign = "-" if number < 0 else ""

    rendered = _render_section(abs(number), _tokenize(section))
    if rendered is None:
        return plain_text(value)
    return sign + rendered


def plain_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_value(value, format_code=None) -> str:
    """Render a stored value under ``format_code`` the way the grid shows it."""
    if value is None:
        return ""
    if _is_sentinel(format_code):
        return plain_text(value)
    if is_date_format(format_code):
        return format_date(value, normalize_date_format(format_code))
    return format_number(value, format_code)


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + TRUNCATION_MARK


def display_text(cell, width: int) -> str:
    """Text for one grid cell, already fitted to ``width``.

    Formula cells show their cached result, never the formula source.
    """
    if cell.formula:
        result = plain_text(cell.cached_value)
        text = result if result != "" else PENDING_FORMULA
    else:
        text = format_value(cell.raw, cell.style.number_format)
    return truncate(text, width)
