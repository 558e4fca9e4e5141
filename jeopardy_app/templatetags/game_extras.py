from django import template

from board_core.abstract_renderer import BaseBoardRenderer

register = template.Library()


@register.filter
def cell_text(cell):
    """Text to show in a clue cell, the placeholder while it is hidden."""
    if not cell or cell.get("text") is None:
        return BaseBoardRenderer.PLACEHOLDER
    return cell["text"]
