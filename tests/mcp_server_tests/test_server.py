"""Tests for the MCP server module."""

import os
import sys
import json
import pytest
from unittest.mock import patch, MagicMock, AsyncMock

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)

tools_spec = importlib.util.spec_from_file_location("tools", os.path.join(MCP_SERVER_PATH, "tools.py"))
tools_module = importlib.util.module_from_spec(tools_spec)
tools_spec.loader.exec_module(tools_module)
MultiProgramTools = tools_module.MultiProgramTools


# Path to the test fixtures
BASE_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))

class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        """Test that server has correct name."""
        assert mcp_server.server.name == "financial-planner"

    def test_program_param_schema(self):
        """Test that PROGRAM_PARAM has correct schema."""
        assert mcp_server.PROGRAM_PARAM['type'] == 'string'
        assert 'description' in mcp_server.PROGRAM_PARAM


class TestGetTools:
    """Tests for get_tools function."""

    def setup_method(self):
        """Reset global tools before each test."""
        mcp_server.tools = None

    def teardown_method(self):
        """Reset global tools after each test."""
        mcp_server.tools = None

    def test_get_tools_initializes_on_first_call(self):
        """Test that get_tools initializes tools on first call."""
        tools = mcp_server.get_tools()

        assert tools is not None
        # Check by class name since we're using dynamic imports
        assert tools.__class__.__name__ == 'MultiProgramTools'
        assert 'nj-couple' in tools.programs
        assert 'fl-retiree' in tools.programs

    def test_get_tools_returns_cached_instance(self):
        """Test that get_tools returns the same instance on subsequent calls."""
        tools1 = mcp_server.get_tools()
        tools2 = mcp_server.get_tools()

        assert tools1 is tools2

    @patch.dict(os.environ, {'FINANCIAL_PLANNER_PROGRAM': 'fl-retiree'})
    def test_get_tools_uses_env_default_program(self):
        """Test that FINANCIAL_PLANNER_PROGRAM env var sets default program."""
        tools = mcp_server.get_tools()

        assert tools.default_program == 'fl-retiree'


class TestListTools:
    """Tests for list_tools function."""

    @pytest.mark.asyncio
    async def test_list_tools_returns_tools(self):
        """Test that list_tools returns a list of Tool objects."""
        tools = await mcp_server.list_tools()

        assert isinstance(tools, list)
        assert all(isinstance(t, Tool) for t in tools)

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        """Test that list_tools contains exactly the expected tool names."""
        tools = await mcp_server.list_tools()
        tool_names = [t.name for t in tools]

        expected_tools = [
            'list_programs',
            'reload_programs',
            'get_program_overview',
            'list_available_years',
            'get_annual_summary',
            'get_tax_details',
            'get_cash_flow',
            'get_balances',
            'get_individual_summary',
            'compare_years',
            'get_lifetime_totals',
            'search_financial_data',
            'compare_programs',
        ]

        assert sorted(tool_names) == sorted(expected_tools)

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        """Test that all tools have descriptions and object input schemas."""
        tools = await mcp_server.list_tools()

        for tool in tools:
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_year_tools_require_year(self):
        """Test that per-year tools require the year parameter."""
        tools = {t.name: t for t in await mcp_server.list_tools()}

        for name in ('get_annual_summary', 'get_tax_details', 'get_cash_flow', 'get_individual_summary'):
            assert 'year' in tools[name].inputSchema['required'], name
        assert 'year' not in tools['get_balances'].inputSchema['required']

    @pytest.mark.asyncio
    async def test_compare_years_requires_both_years(self):
        """Test that compare_years requires both year1 and year2."""
        tools = await mcp_server.list_tools()
        compare = next(t for t in tools if t.name == 'compare_years')

        assert 'year1' in compare.inputSchema['required']
        assert 'year2' in compare.inputSchema['required']


class TestCallTool:
    """Tests for call_tool function."""

    def setup_method(self):
        """Reset global tools before each test."""
        mcp_server.tools = None

    async def call(self, name, arguments):
        result = await mcp_server.call_tool(name, arguments)
        assert len(result) == 1
        assert isinstance(result[0], TextContent)
        return json.loads(result[0].text)

    @pytest.mark.asyncio
    async def test_call_list_programs(self):
        data = await self.call('list_programs', {})
        assert 'nj-couple' in data['available_programs']

    @pytest.mark.asyncio
    async def test_call_get_program_overview(self):
        data = await self.call('get_program_overview', {'program': 'nj-couple'})
        assert data['program'] == 'nj-couple'
        assert data['state'] == 'NJ'
        assert data['planning_horizon']['first_year'] == 2026

    @pytest.mark.asyncio
    async def test_call_list_available_years(self):
        data = await self.call('list_available_years', {'program': 'nj-couple'})
        assert data['years'][0] == 2026
        assert data['years'][-1] == 2055

    @pytest.mark.asyncio
    async def test_call_get_annual_summary(self):
        data = await self.call('get_annual_summary', {'year': 2026, 'program': 'nj-couple'})
        assert data['year'] == 2026
        assert data['total_income'] == 145000 + 92000

    @pytest.mark.asyncio
    async def test_call_get_tax_details(self):
        data = await self.call('get_tax_details', {'year': 2026, 'program': 'nj-couple'})
        assert data['state_income_tax'] > 0
        assert 'fica' in data

    @pytest.mark.asyncio
    async def test_call_get_cash_flow(self):
        data = await self.call('get_cash_flow', {'year': 2030, 'program': 'nj-couple'})
        assert data['balanced'] is True

    @pytest.mark.asyncio
    async def test_call_get_balances(self):
        data = await self.call('get_balances', {'program': 'nj-couple'})
        assert data['final_year'] == 2055
        data = await self.call('get_balances', {'year': 2030, 'program': 'nj-couple'})
        assert data['year'] == 2030

    @pytest.mark.asyncio
    async def test_call_get_individual_summary(self):
        data = await self.call('get_individual_summary', {'year': 2030, 'name': 'Jordan', 'program': 'nj-couple'})
        assert list(data['members']) == ['Jordan']
        assert data['members']['Jordan']['age'] == 64

    @pytest.mark.asyncio
    async def test_call_compare_years(self):
        data = await self.call('compare_years', {'year1': 2026, 'year2': 2030, 'program': 'nj-couple'})
        assert data['comparison'] == '2026 vs 2030'

    @pytest.mark.asyncio
    async def test_call_get_lifetime_totals(self):
        data = await self.call('get_lifetime_totals', {'program': 'fl-retiree'})
        assert data['lifetime_totals']['state_tax'] == 0

    @pytest.mark.asyncio
    async def test_call_search_financial_data(self):
        data = await self.call('search_financial_data', {'query': 'RMD', 'year': 2030, 'program': 'fl-retiree'})
        assert data['results']['rmd_withdrawals'] > 0

    @pytest.mark.asyncio
    async def test_call_compare_programs(self):
        data = await self.call('compare_programs', {'program1': 'nj-couple', 'program2': 'fl-retiree',
                                                    'metrics': ['lifetime_taxes', 'deficit']})
        assert list(data['metrics']) == ['lifetime_taxes', 'deficit']

    @pytest.mark.asyncio
    async def test_call_reload_programs(self):
        data = await self.call('reload_programs', {})
        assert data['status'] == 'success'

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self):
        data = await self.call('unknown_tool', {})
        assert 'Unknown tool' in data['error']

    @pytest.mark.asyncio
    async def test_multiple_programs_need_explicit_choice(self):
        data = await self.call('get_lifetime_totals', {})
        assert 'Multiple programs' in data['error']

    @pytest.mark.asyncio
    async def test_missing_argument_returns_error(self):
        data = await self.call('get_annual_summary', {'program': 'nj-couple'})
        assert 'error' in data


class TestResponseFormat:
    """Tests for response format consistency."""

    def setup_method(self):
        """Reset global tools before each test."""
        mcp_server.tools = None

    @pytest.mark.asyncio
    async def test_response_is_valid_json(self):
        """Test that all responses are valid JSON."""
        tools = await mcp_server.list_tools()

        for tool in tools:
            args = {'program': 'fl-retiree'}
            required = tool.inputSchema.get('required', [])
            if 'year' in required:
                args['year'] = 2026
            if 'year1' in required:
                args['year1'] = 2026
                args['year2'] = 2030
            if 'query' in required:
                args['query'] = 'tax'
            if 'program1' in required:
                args = {'program1': 'fl-retiree', 'program2': 'nj-couple'}

            result = await mcp_server.call_tool(tool.name, args)

            data = json.loads(result[0].text)
            assert isinstance(data, dict)
            assert 'error' not in data, tool.name
