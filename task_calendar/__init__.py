# -*- coding: utf-8 -*-
from task_calendar.grid import InvalidArgumentError, build_grid
from task_calendar.recurrence import expand
from task_calendar.view import assemble, format_month, generate_month_view

__all__ = [
    "InvalidArgumentError",
    "assemble",
    "build_grid",
    "expand",
    "format_month",
    "generate_month_view",
]
