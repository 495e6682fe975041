"""Tests for the tool registry, dispatch and MCP server wiring."""

from unittest.mock import AsyncMock, patch

import mcp.types as types
import pytest

from mcp_stirling_pdf.dispatcher import Dispatcher
from mcp_stirling_pdf.operations import OPERATIONS_BY_NAME
from mcp_stirling_pdf.server import build_server

from conftest import pdf_data_url

TOOL_NAMES = [
    "merge_pdfs",
    "split_pdf",
    "compress_pdf",
    "convert_pdf_to_images",
    "rotate_pdf",
    "add_watermark",
    "remove_pages",
    "extract_images",
    "convert_images_to_pdf",
    "ocr_pdf",
]


class TestListTools:

    def test_catalog(self, stub_client):
        tools = Dispatcher(stub_client).list_tools()
        assert [tool.name for tool in tools] == TOOL_NAMES
        assert all(tool.description for tool in tools)

    def test_merge_schema(self, stub_client):
        tools = {tool.name: tool for tool in Dispatcher(stub_client).list_tools()}
        schema = tools["merge_pdfs"].inputSchema

        assert schema["type"] == "object"
        assert schema["required"] == ["pdfFiles"]
        assert schema["properties"]["pdfFiles"]["type"] == "array"
        assert schema["properties"]["pdfFiles"]["items"] == {"type": "string"}
        assert schema["properties"]["sortType"]["enum"] == [
            "orderProvided", "alphabetical", "reverseAlphabetical",
        ]

    def test_required_fields(self, stub_client):
        tools = {tool.name: tool for tool in Dispatcher(stub_client).list_tools()}
        assert tools["add_watermark"].inputSchema["required"] == ["pdfFile", "watermarkText"]
        assert tools["remove_pages"].inputSchema["required"] == ["pdfFile", "pagesToRemove"]
        assert tools["ocr_pdf"].inputSchema["required"] == ["pdfFile"]
        assert "(default: eng)" in tools["ocr_pdf"].inputSchema["properties"]["languages"]["description"]

    def test_default_registry(self, stub_client):
        dispatcher = Dispatcher(stub_client)
        assert dispatcher.get_operation("ocr_pdf") is OPERATIONS_BY_NAME["ocr_pdf"]
        assert [tool.name for tool in dispatcher.list_tools()] == list(OPERATIONS_BY_NAME)


@pytest.mark.asyncio
class TestInvoke:

    async def test_success_envelope(self, stub_client):
        result = await Dispatcher(stub_client).invoke("compress_pdf", {"pdfFile": pdf_data_url()})

        assert result.isError is False
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert result.content[0].text.startswith("✅ Successfully compressed PDF (optimization level: 2)")

    async def test_handler_failure_is_text_not_error_flag(self, stub_client):
        result = await Dispatcher(stub_client).invoke("compress_pdf", {})

        assert result.isError is False
        assert result.content[0].text == "❌ Error: pdfFile is required"

    async def test_unknown_tool(self, stub_client):
        result = await Dispatcher(stub_client).invoke("shred_pdf", {"pdfFile": pdf_data_url()})

        assert result.isError is True
        assert "shred_pdf" in result.content[0].text
        assert stub_client.calls == []

    async def test_unexpected_handler_crash(self, stub_client):
        with patch("mcp_stirling_pdf.dispatcher.run_operation", AsyncMock(side_effect=RuntimeError("bug"))):
            result = await Dispatcher(stub_client).invoke("rotate_pdf", {"pdfFile": pdf_data_url()})

        assert result.isError is True
        assert result.content[0].text == "❌ Error: bug"


@pytest.mark.asyncio
class TestServer:

    async def test_unknown_tool_is_flagged_by_sdk(self, stub_client):
        server = build_server(Dispatcher(stub_client))
        handler = server.request_handlers[types.CallToolRequest]

        response = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="shred_pdf", arguments={}),
        ))

        result = response.root
        assert result.isError is True
        assert "shred_pdf" in result.content[0].text

    async def test_tool_call_through_sdk(self, stub_client):
        server = build_server(Dispatcher(stub_client))
        handler = server.request_handlers[types.CallToolRequest]

        response = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="compress_pdf", arguments={"pdfFile": pdf_data_url()}),
        ))

        result = response.root
        assert result.isError is False
        assert result.content[0].text.startswith("✅ ")
        assert len(stub_client.calls) == 1
