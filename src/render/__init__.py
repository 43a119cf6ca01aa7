"""Render module for projection output display."""

from render.renderers import (
    BaseRenderer,
    RangeRenderer,
    YearDetailsRenderer,
    BalancesRenderer,
    AnnualSummaryRenderer,
    CashFlowRenderer,
    CustomRenderer,
    get_custom_renderer_factory,
    parse_year_range,
    RENDERER_REGISTRY,
    CUSTOM_RENDERERS,
)

__all__ = [
    'BaseRenderer',
    'RangeRenderer',
    'YearDetailsRenderer',
    'BalancesRenderer',
    'AnnualSummaryRenderer',
    'CashFlowRenderer',
    'CustomRenderer',
    'get_custom_renderer_factory',
    'parse_year_range',
    'RENDERER_REGISTRY',
    'CUSTOM_RENDERERS',
]
