import os

HELP_TEXT = "^W:Quit ^S:Save | WASD:Move | C/V:Copy/Paste | F2:Edit | F4:Sheets"


def render_header(context, width):
    """
    context keys: file_path, sheet_name, sheet_index, sheet_count
    """
    fname = context.get("file_path") or ""
    sheet_name = context.get("sheet_name") or "???"
    index = context.get("sheet_index", 0) + 1
    count = context.get("sheet_count", 1)
    text = f" File: {fname} | Sheet: {sheet_name} ({index}/{count})"
    return text.ljust(width)[:width]


def render_status(context, width):
    """
    context keys: status_msg, cell_ref, selection_ref, file_path
    """
    if context.get("status_msg"):
        text = f" {context['status_msg']}"
    else:
        cell_ref = context.get("cell_ref", "")
        sel_ref = context.get("selection_ref")
        sel_info = f" [{sel_ref}]" if sel_ref else ""
        fname = context.get("file_path") or ""
        if fname:
            fname = f" | {os.path.basename(fname)}"
        text = f" {cell_ref}{sel_info} | {HELP_TEXT}{fname}"

    return text.ljust(width)[:width]
