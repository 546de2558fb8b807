"""
Jinja2 environment shared by the invoice and report renderers.

Architecture Decision: Template Pattern
Printable documents are templates so their layout can change without
touching the services that compute the numbers.
"""

import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from clientdesk.i18n import tr
from clientdesk.utils import get_resource_path


def format_money(value, symbol: str = "$") -> str:
    """1234.5 -> '$1,234.50'"""
    return f"{symbol}{float(value or 0):,.2f}"


def format_date(dt, fmt: str = "%b %d, %Y") -> str:
    """Format datetime object"""
    if dt is None:
        return ""
    return dt.strftime(fmt)


def format_hours(value, digits: int = 2) -> str:
    return f"{float(value or 0):.{digits}f}"


def format_percent(value, digits: int = 1) -> str:
    return f"{float(value or 0):.{digits}f}%"


def create_environment(template_dir: Optional[Path] = None,
                       currency_symbol: str = "$") -> Environment:
    """
    Build the Jinja2 environment with the app's filters and tr() as a global.

    Args:
        template_dir: Directory containing Jinja2 templates
        currency_symbol: Prefix used by the money filter
    """
    if template_dir is None:
        template_dir = get_resource_path("clientdesk/resources/templates")

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(['html']),
        trim_blocks=True,
        lstrip_blocks=True
    )

    # Add custom filters
    env.filters['money'] = lambda value: format_money(value, currency_symbol)
    env.filters['format_date'] = format_date
    env.filters['format_hours'] = format_hours
    env.filters['percent'] = format_percent
    env.globals['tr'] = tr
    env.globals['now'] = datetime.datetime.now
    return env
